"""Deploy stage helpers."""

from addon_deploy.deploy.deployer import DeployResult, deploy_artifact, ensure_destination_dir

__all__ = [
    "DeployResult",
    "deploy_artifact",
    "ensure_destination_dir",
]
