"""Installation driver.

Turns a package listing into an ordered InstallPlan and runs it through a
PackageManager one package at a time. The first failing install stops the
run: a non-zero exit code from the package manager is a hard failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from rich.markup import escape

from deploykit.manifest.ordering import install_order, uncategorized
from deploykit.manifest.parser import parse_manifest
from deploykit.models.action import ActionResult, InstallAction
from deploykit.models.package import PackageCategory, PackageRecord
from deploykit.operators.base import ListMode, PackageManager
from deploykit.utils.formatting import (
    console,
    create_plan_table,
    create_results_table,
    print_error,
    print_info,
    print_success,
)

logger = logging.getLogger(__name__)


class InstallError(Exception):
    """Raised when the package manager fails to install a package.

    Attributes:
        result: The failed ActionResult.
        completed: Results of every action attempted before the failure,
            including the failed one.
    """

    def __init__(self, result: ActionResult, completed: list[ActionResult]) -> None:
        super().__init__(f"Failed to install {result.action.package}: {result.error}")
        self.result = result
        self.completed = completed


@dataclass(frozen=True, slots=True)
class InstallPlan:
    """Packages to install, already in installation order.

    Attributes:
        actions: Install actions by category, then package identifier.
        skipped: Records left out of the plan (unknown section or no
            package identifier).
    """

    actions: tuple[InstallAction, ...] = ()
    skipped: tuple[PackageRecord, ...] = ()

    @classmethod
    def from_records(cls, records: Iterable[PackageRecord]) -> InstallPlan:
        """Build a plan from parsed records.

        Args:
            records: Records from one listing snapshot.

        Returns:
            InstallPlan honouring the category install order.
        """
        materialized = list(records)
        actions: list[InstallAction] = []
        skipped: list[PackageRecord] = uncategorized(materialized)

        for record in install_order(materialized):
            if not record.package:
                logger.debug("Skipping %s record without package identifier", record.section)
                skipped.append(record)
                continue
            actions.append(InstallAction.from_record(record))

        return cls(actions=tuple(actions), skipped=tuple(skipped))

    @classmethod
    def from_listing(cls, text: str) -> InstallPlan:
        """Parse raw listing text and build a plan from it."""
        return cls.from_records(parse_manifest(text))

    def __len__(self) -> int:
        return len(self.actions)

    @property
    def packages(self) -> list[str]:
        """Package identifiers in installation order."""
        return [action.package for action in self.actions]

    def by_category(self) -> dict[PackageCategory, list[InstallAction]]:
        """Group actions by category, keeping installation order."""
        groups: dict[PackageCategory, list[InstallAction]] = {}
        for action in self.actions:
            groups.setdefault(action.category, []).append(action)
        return groups

    def select(self, packages: Iterable[str]) -> InstallPlan:
        """Keep only the named packages, preserving order.

        Args:
            packages: Package identifiers to keep.

        Returns:
            A narrower plan. Unknown identifiers are ignored.
        """
        wanted = set(packages)
        return InstallPlan(
            actions=tuple(a for a in self.actions if a.package in wanted),
            skipped=self.skipped,
        )

    def without(self, installed: Iterable[PackageRecord]) -> InstallPlan:
        """Drop packages that already appear in an installed listing."""
        present = {record.package for record in installed if record.package}
        return InstallPlan(
            actions=tuple(a for a in self.actions if a.package not in present),
            skipped=self.skipped,
        )


class Installer:
    """Runs install plans against a package manager.

    Attributes:
        dry_run: If True, report what would be installed without
            invoking the package manager.

    Example:
        >>> installer = Installer(NipkgManager())
        >>> plan = installer.plan(skip_installed=True)
        >>> results = installer.run(plan)
    """

    def __init__(self, manager: PackageManager, *, dry_run: bool = False) -> None:
        self._manager = manager
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if installer is in dry-run mode."""
        return self._dry_run

    def plan(
        self,
        mode: ListMode = ListMode.AVAILABLE,
        *,
        skip_installed: bool = False,
    ) -> InstallPlan:
        """Query the package manager and build a plan.

        Args:
            mode: Listing to plan from.
            skip_installed: Also query installed packages and leave
                them out of the plan.

        Returns:
            InstallPlan for the current package-manager state.

        Raises:
            PackageManagerError: If a listing query fails.
        """
        plan = InstallPlan.from_listing(self._manager.list_packages(mode))
        if skip_installed:
            installed = parse_manifest(self._manager.list_packages(ListMode.INSTALLED))
            plan = plan.without(installed)
        logger.info("Planned %d package(s), skipped %d", len(plan), len(plan.skipped))
        return plan

    def run(
        self,
        plan: InstallPlan,
        *,
        on_result: Callable[[ActionResult], None] | None = None,
    ) -> list[ActionResult]:
        """Install every package in plan order.

        Args:
            plan: Plan to execute.
            on_result: Called after each action with its result.

        Returns:
            One ActionResult per action.

        Raises:
            InstallError: On the first package the manager fails to install.
            PackageManagerError: If the package manager is unavailable.
        """
        if not self._dry_run:
            self._manager.require_available()

        results: list[ActionResult] = []
        for action in plan.actions:
            result = self._install(action)
            results.append(result)
            if on_result is not None:
                on_result(result)
            if result.failed:
                logger.warning("Install of %s failed: %s", action.package, result.error)
                raise InstallError(result, results)

        return results

    def run_reported(self, plan: InstallPlan) -> list[ActionResult]:
        """Run a plan and report progress on the console.

        Prints the plan table, one line per installed package and a final
        results table. On failure the error goes to the error console and
        InstallError is re-raised.

        Args:
            plan: Plan to execute.

        Returns:
            One ActionResult per action.

        Raises:
            InstallError: On the first package the manager fails to install.
            PackageManagerError: If the package manager is unavailable.
        """
        if plan.skipped:
            print_info(f"Skipping {len(plan.skipped)} package(s) outside the install order")
        if not plan.actions:
            print_success("Nothing to install")
            return []

        console.print(create_plan_table(plan, dry_run=self._dry_run))

        def report(result: ActionResult) -> None:
            if result.success:
                print_info(f"{escape(result.action.package)}: {escape(result.message or '')}")

        try:
            results = self.run(plan, on_result=report)
        except InstallError as e:
            console.print(create_results_table(e.completed))
            print_error(escape(str(e)))
            raise

        console.print(create_results_table(results))
        verb = "Would install" if self._dry_run else "Installed"
        print_success(f"{verb} {len(results)} package(s)")
        return results

    def install_available(self, *, skip_installed: bool = True) -> list[ActionResult]:
        """Plan from the available listing and run the plan."""
        return self.run(self.plan(ListMode.AVAILABLE, skip_installed=skip_installed))

    def _install(self, action: InstallAction) -> ActionResult:
        if self._dry_run:
            return ActionResult(action=action, success=True, message="Dry-run: not installed")

        command = self._manager.install(action.package)
        if command.success:
            return ActionResult(
                action=action,
                success=True,
                returncode=command.returncode,
                message="Installed",
            )
        return ActionResult(
            action=action,
            success=False,
            returncode=command.returncode,
            error=command.error_message(f"exit code {command.returncode}"),
        )
