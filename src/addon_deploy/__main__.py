"""Allow ``python -m addon_deploy``."""

from addon_deploy.cli import main

main()
