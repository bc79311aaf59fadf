"""Migration orchestrator for copying Vault KV secrets into Parameter Store.

The run has three steps:
1. Discover KV mounts (or take an explicit allow-list)
2. Walk every mount and merge its secrets into one flat mapping
3. Publish the mapping to Parameter Store, one parameter per secret

Reading is all-or-nothing: by default the first failed mount stops the run
before anything is written. Writing is best-effort per parameter.

Usage:
    python -m vault_to_ssm.migration.migrate --dry-run
    vault-to-ssm --vault-addr https://vault.example.com:8200 --aws-region eu-west-1

Example:
    # Preview which parameters would be created
    vault-to-ssm --dry-run

    # Migrate two mounts without discovery, overwriting existing parameters
    vault-to-ssm --mount secret=v1 --mount kv=v2 --overwrite
"""

import argparse
import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError

from vault_to_ssm import config as env
from vault_to_ssm.exceptions import MigrationAbortedError, MigrationError
from vault_to_ssm.migration.aggregate import SecretAggregator
from vault_to_ssm.ssm.client import ParameterStoreConfig
from vault_to_ssm.ssm.publisher import ParameterStorePublisher, PublishResult
from vault_to_ssm.vault.classifier import build_mounts, parse_mount_specs
from vault_to_ssm.vault.client import VaultClient
from vault_to_ssm.vault.models import Mount, VaultConnectionConfig
from vault_to_ssm.vault.walker import DEFAULT_MAX_DEPTH, TreeWalker

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_READ_FAILED = 1
EXIT_WRITE_FAILED = 2


class MountStatus(Enum):
    """Lifecycle of a mount within one run."""
    DISCOVERED = "discovered"
    WALKING = "walking"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class MountState:
    """Progress of a single mount."""
    mount: Mount
    status: MountStatus = MountStatus.DISCOVERED
    entries: int = 0
    error: Optional[str] = None


@dataclass
class MigrationConfig:
    """Configuration for the migration."""
    vault: VaultConnectionConfig
    parameter_store: ParameterStoreConfig = field(default_factory=ParameterStoreConfig)
    mounts: list[str] = field(default_factory=list)
    workers: int = 1
    max_depth: int = DEFAULT_MAX_DEPTH
    dry_run: bool = False
    overwrite: bool = False
    isolate_mount_failures: bool = False
    strict_publish: bool = False


@dataclass
class MigrationReport:
    """Result of a migration run."""
    mounts: list[MountState] = field(default_factory=list)
    publish: Optional[PublishResult] = None

    @property
    def failed_mounts(self) -> list[MountState]:
        return [s for s in self.mounts if s.status == MountStatus.FAILED]

    def exit_code(self, strict_publish: bool = False) -> int:
        if self.failed_mounts:
            return EXIT_READ_FAILED
        if strict_publish and self.publish is not None and self.publish.failed:
            return EXIT_WRITE_FAILED
        return EXIT_OK

    def to_dict(self) -> dict[str, Any]:
        return {
            "mounts": [
                {
                    "path": s.mount.path,
                    "variant": s.mount.variant.value,
                    "status": s.status.value,
                    "entries": s.entries,
                    "error": s.error,
                }
                for s in self.mounts
            ],
            "published": list(self.publish.successful) if self.publish else [],
            "failed": list(self.publish.failed) if self.publish else [],
        }


class MigrationOrchestrator:
    """Orchestrator for the Vault to Parameter Store migration."""

    def __init__(
        self,
        config: MigrationConfig,
        vault_client: VaultClient,
        publisher: ParameterStorePublisher,
    ):
        """Initialize the migration orchestrator.

        Args:
            config: Migration configuration
            vault_client: Authenticated-on-demand Vault client
            publisher: Parameter Store publisher owning the SSM client
        """
        if config.workers < 1:
            raise ValueError(f"workers must be >= 1, got {config.workers}")
        self.config = config
        self.vault_client = vault_client
        self.publisher = publisher
        self.aggregator = SecretAggregator()
        self.states: dict[str, MountState] = {}

    def discover_mounts(self) -> list[Mount]:
        """Resolve the mounts to walk.

        Raises:
            AccessError: If discovery finds no KV mount
            ConfigurationError: If an allow-list entry is invalid
        """
        if self.config.mounts:
            mounts = parse_mount_specs(self.config.mounts)
            logger.info(f"Using {len(mounts)} mounts from the allow-list, skipping discovery")
        else:
            mounts = build_mounts(self.vault_client.list_mounts())

        self.states = {m.path: MountState(mount=m) for m in mounts}
        return mounts

    def _walk_mount(self, mount: Mount) -> None:
        state = self.states[mount.path]
        state.status = MountStatus.WALKING
        logger.info(f"Walking mount {mount.path} ({mount.variant.value})")
        try:
            partial = TreeWalker(
                self.vault_client, mount, max_depth=self.config.max_depth
            ).walk()
        except MigrationError as e:
            state.status = MountStatus.FAILED
            state.error = str(e)
            raise

        # only complete walks reach the aggregator
        self.aggregator.merge(mount.path, partial)
        state.entries = len(partial)
        state.status = MountStatus.SUCCEEDED

    def _collect_mount(self, mount: Mount) -> None:
        try:
            self._walk_mount(mount)
        except MigrationError as e:
            if not self.config.isolate_mount_failures:
                raise MigrationAbortedError(mount.path, e) from e
            logger.error(f"Skipping mount {mount.path}: {e}")

    def collect(self) -> dict[str, str]:
        """Walk every discovered mount and return the aggregated mapping.

        Raises:
            MigrationAbortedError: If a mount walk fails and failures are
                not isolated
        """
        mounts = [s.mount for s in self.states.values()]

        if self.config.workers == 1 or len(mounts) <= 1:
            for mount in mounts:
                self._collect_mount(mount)
        else:
            executor = ThreadPoolExecutor(max_workers=self.config.workers)
            try:
                futures = [executor.submit(self._collect_mount, m) for m in mounts]
                for future in as_completed(futures):
                    future.result()
            finally:
                # walks that have not started are dropped after a failure
                executor.shutdown(wait=True, cancel_futures=True)

        data = self.aggregator.data
        for path, count in sorted(self.aggregator.counts.items()):
            logger.info(f"  {path}: {count} secrets")
        logger.info(f"Aggregated {len(data)} secrets from {len(mounts)} mounts")
        return data

    def publish(self, data: dict[str, str]) -> PublishResult:
        """Write the aggregated mapping to Parameter Store."""
        return self.publisher.publish(data)

    def run(self) -> MigrationReport:
        """Run discovery, collection and publishing.

        Returns:
            MigrationReport with per mount states and the publish outcome

        Raises:
            AccessError: If no mount is accessible
            MigrationAbortedError: If a mount walk fails in strict mode
        """
        self.discover_mounts()
        data = self.collect()
        result = self.publish(data)
        return MigrationReport(mounts=list(self.states.values()), publish=result)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser; defaults come from the environment."""
    parser = argparse.ArgumentParser(
        description="Copy secrets from Vault KV mounts into AWS SSM Parameter Store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Preview the migration of every KV mount
    vault-to-ssm --dry-run

    # Migrate selected mounts only
    vault-to-ssm --mount secret=v1 --mount kv=v2
        """
    )

    parser.add_argument(
        "--vault-addr",
        default=env.VAULT_ADDR,
        help="Vault server address (env: VAULT_ADDR)"
    )
    parser.add_argument(
        "--auth-method",
        default=env.VAULT_AUTH_METHOD,
        choices=["token", "approle", "kubernetes"],
        help="Authentication method"
    )
    parser.add_argument(
        "--token",
        default=env.VAULT_TOKEN,
        help="Vault token (env: VAULT_TOKEN)"
    )
    parser.add_argument(
        "--role-id",
        default=env.VAULT_ROLE_ID,
        help="AppRole role ID"
    )
    parser.add_argument(
        "--secret-id",
        default=env.VAULT_SECRET_ID,
        help="AppRole secret ID"
    )
    parser.add_argument(
        "--kubernetes-role",
        default=env.VAULT_KUBERNETES_ROLE,
        help="Vault role for Kubernetes auth"
    )
    parser.add_argument(
        "--namespace",
        default=env.VAULT_NAMESPACE,
        help="Enterprise namespace"
    )
    parser.add_argument(
        "--no-verify",
        action="store_true",
        default=env.VAULT_SKIP_VERIFY,
        help="Disable TLS verification"
    )
    parser.add_argument(
        "--aws-region",
        default=env.AWS_REGION,
        help="AWS region of the Parameter Store"
    )
    parser.add_argument(
        "--aws-profile",
        default=env.AWS_PROFILE,
        help="AWS shared credentials profile"
    )
    parser.add_argument(
        "--ssm-endpoint-url",
        default=env.SSM_ENDPOINT_URL,
        help="Custom SSM endpoint URL"
    )
    parser.add_argument(
        "--mount", "-m",
        action="append",
        default=[],
        help="Mount to migrate as PATH[=v1|v2], skips discovery (repeatable)"
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=1,
        help="Mounts walked and parameters written concurrently"
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=env.MAX_WALK_DEPTH,
        help="Maximum nesting depth below a mount"
    )
    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Read from Vault but do not write parameters"
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite parameters that already exist"
    )
    parser.add_argument(
        "--continue-on-mount-error",
        action="store_true",
        help="Skip mounts that fail to walk instead of aborting"
    )
    parser.add_argument(
        "--strict-publish",
        action="store_true",
        help="Exit non-zero if any parameter fails to write"
    )
    parser.add_argument(
        "--report",
        metavar="PATH",
        help="Write a JSON report of mount states and published parameters"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    return parser


def config_from_args(args: argparse.Namespace) -> MigrationConfig:
    """Build the migration configuration from parsed arguments.

    Raises:
        ValidationError: If the Vault connection settings are invalid
    """
    vault = VaultConnectionConfig(
        vault_addr=args.vault_addr,
        auth_method=args.auth_method,
        token=args.token,
        role_id=args.role_id,
        secret_id=args.secret_id,
        kubernetes_role=args.kubernetes_role,
        namespace=args.namespace,
        verify=not args.no_verify,
    )
    return MigrationConfig(
        vault=vault,
        parameter_store=ParameterStoreConfig(
            region=args.aws_region,
            profile=args.aws_profile,
            endpoint_url=args.ssm_endpoint_url,
        ),
        mounts=list(args.mount),
        workers=args.workers,
        max_depth=args.max_depth,
        dry_run=args.dry_run,
        overwrite=args.overwrite,
        isolate_mount_failures=args.continue_on_mount_error,
        strict_publish=args.strict_publish,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the migration."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    if args.workers < 1:
        parser.error("--workers must be at least 1")
    if args.max_depth < 0:
        parser.error("--max-depth must not be negative")

    try:
        config = config_from_args(args)
    except ValidationError as e:
        parser.error(f"invalid Vault settings: {e}")

    if not config.vault.has_credentials():
        parser.error(f"missing credentials for auth method '{config.vault.auth_method}'")

    ssm_client = None if config.dry_run else config.parameter_store.create_ssm_client()
    publisher = ParameterStorePublisher(
        ssm_client,
        overwrite=config.overwrite,
        dry_run=config.dry_run,
        workers=config.workers,
    )

    with VaultClient(config.vault) as vault_client:
        orchestrator = MigrationOrchestrator(config, vault_client, publisher)
        try:
            report = orchestrator.run()
        except MigrationError as e:
            logger.error(f"Migration aborted: {e}")
            return EXIT_READ_FAILED

    for state in report.failed_mounts:
        logger.error(f"Mount {state.mount.path} failed: {state.error}")

    if args.report:
        with open(args.report, "w") as f:
            json.dump(report.to_dict(), f, indent=2)
        logger.info(f"Report written to {args.report}")

    return report.exit_code(strict_publish=config.strict_publish)


if __name__ == "__main__":
    sys.exit(main())
