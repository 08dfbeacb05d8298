"""Entry point for ``python -m cms_cloud``."""

from cms_cloud.cli import main

main()
