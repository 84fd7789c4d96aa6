"""Allow running as: python -m steering_cli"""

from steering_cli.main import app

if __name__ == "__main__":
    app()
