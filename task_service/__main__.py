"""Run the development server: ``python -m task_service``."""

import logging

from task_service import create_app


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    app = create_app()
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])


if __name__ == "__main__":
    main()
