"""
Convergence engine.

Applies a list of declarative resources to the host in order. Each
resource is tested first and repaired only when it has drifted, so a
second run against a converged host changes nothing (execute resources
excepted, which always run).

Failures are not retried or recovered: the first failing resource halts
the run and its exception propagates to the caller.

Usage:
    from delivery_rust.converge import ConvergenceEngine

    engine = ConvergenceEngine(config)
    report = engine.converge(build_prep_plan(config))
    print(report.summary())
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Set

from delivery_rust.config.parser import PrepConfig
from delivery_rust.converge.environment import EnvironmentStore, default_environment_store
from delivery_rust.converge.packages import PackageBackend, package_backend_for
from delivery_rust.converge.providers import (
    EnvProvider,
    ExecuteProvider,
    FileProvider,
    PackageProvider,
    Provider,
)
from delivery_rust.converge.report import (
    SKIPPED,
    UP_TO_DATE,
    UPDATED,
    WOULD_UPDATE,
    RunReport,
)
from delivery_rust.converge.runner import CommandRunner
from delivery_rust.core.exceptions import DeliveryRustError, RecipeNotFoundError
from delivery_rust.core.locking import DEFAULT_LOCK_TIMEOUT, provisioning_lock
from delivery_rust.recipes.registry import RecipeRegistry, create_default_registry
from delivery_rust.recipes.resources import IncludeRecipe, LogResource

logger = logging.getLogger(__name__)

# Log resources write here, not to the engine's own logger
recipe_logger = logging.getLogger("delivery_rust.recipes")


class ConvergenceEngine:
    """
    Converges resources against the host.

    Attributes:
        config: Configuration of the run
        registry: Registry used to resolve included recipes
        why_run: Test resources without changing the host
    """

    def __init__(
        self,
        config: PrepConfig,
        registry: Optional[RecipeRegistry] = None,
        runner: Optional[CommandRunner] = None,
        environment: Optional[EnvironmentStore] = None,
        package_backend: Optional[PackageBackend] = None,
        why_run: bool = False,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ):
        """
        Initialize the engine.

        Args:
            config: Configuration of the run
            registry: Recipe registry (default: built-ins plus configured recipes)
            runner: CommandRunner for all external commands
            environment: Environment store (default: host-appropriate store)
            package_backend: Package backend (default: chosen by platform family)
            why_run: Report what would change without changing it
            lock_timeout: Seconds to wait for the run lock when lock_file is set
        """
        self.config = config
        self.registry = registry or create_default_registry(config)
        self.runner = runner or CommandRunner()
        self.why_run = why_run
        self.lock_timeout = lock_timeout

        if package_backend is None:
            package_backend = package_backend_for(config.platform_family, self.runner)

        self._environment = environment
        self._providers = {
            "file": FileProvider(),
            "execute": ExecuteProvider(self.runner),
            "package": PackageProvider(package_backend),
        }
        self._included: Set[str] = set()

    def _provider_for(self, resource) -> Provider:
        if resource.resource_type == "env" and "env" not in self._providers:
            # Store is created on the first env resource
            store = self._environment or default_environment_store()
            self._providers["env"] = EnvProvider(store)

        try:
            return self._providers[resource.resource_type]
        except KeyError:
            raise DeliveryRustError(
                f"No provider for resource type: {resource.resource_type}"
            )

    def converge(self, resources: Iterable) -> RunReport:
        """
        Converge resources in order.

        Args:
            resources: Resource descriptors

        Returns:
            RunReport with one entry per converged resource

        Raises:
            DeliveryRustError: The first failure; later resources are not run
            RecipeNotFoundError: An included recipe is unknown and includes are
                strict; raised before any resource converges
        """
        report = RunReport(
            platform_family=self.config.platform_family, why_run=self.why_run
        )
        self._included = set()
        resources = list(resources)

        if self.config.strict_includes:
            self._check_includes(resources, set())

        if self.config.lock_file:
            with provisioning_lock(Path(self.config.lock_file), self.lock_timeout):
                self._converge_all(resources, report)
        else:
            self._converge_all(resources, report)

        logger.debug(f"Converge finished: {report.summary()}")
        return report

    def _check_includes(self, resources, seen: Set[str]) -> None:
        """Resolve every included recipe, recursively, before anything converges."""
        for resource in resources:
            if not isinstance(resource, IncludeRecipe):
                continue
            name = resource.recipe_name
            if name in seen:
                continue
            seen.add(name)
            self._check_includes(self.registry.resolve(name, self.config), seen)

    def _converge_all(self, resources, report: RunReport) -> None:
        for resource in resources:
            self._converge_resource(resource, report)

    def _converge_resource(self, resource, report: RunReport) -> None:
        if isinstance(resource, IncludeRecipe):
            self._include_recipe(resource, report)
            return

        if isinstance(resource, LogResource):
            recipe_logger.log(resource.level, resource.message)
            report.add(resource, UPDATED)
            return

        description = resource.describe()
        provider = self._provider_for(resource)

        try:
            if not provider.needs_update(resource):
                logger.debug(f"{description} is up to date")
                report.add(resource, UP_TO_DATE)
            elif self.why_run:
                logger.info(f"Would update {description}")
                report.add(resource, WOULD_UPDATE)
            else:
                provider.apply(resource)
                logger.info(f"Updated {description}")
                report.add(resource, UPDATED)
        except DeliveryRustError as e:
            logger.error(f"{description} failed: {e}")
            raise

    def _include_recipe(self, resource: IncludeRecipe, report: RunReport) -> None:
        name = resource.recipe_name

        if name in self._included:
            logger.debug(f"Recipe {name} already included in this run")
            return

        try:
            included = self.registry.resolve(name, self.config)
        except RecipeNotFoundError:
            if self.config.strict_includes:
                raise
            logger.warning(f"No recipe registered for {name}, skipping")
            report.add(resource, SKIPPED)
            return

        self._included.add(name)
        logger.info(f"Including recipe {name}")
        report.add(resource, UPDATED)
        self._converge_all(included, report)
