"""Entry point for `python -m addon_deploy`."""

from addon_deploy.tool.addon_deploy import main

if __name__ == "__main__":
    main()
