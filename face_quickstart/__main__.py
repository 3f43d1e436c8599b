# coding: utf-8

"""Run the face quickstart: python -m face_quickstart"""

from dotenv import load_dotenv

from .config import QuickstartConfig
from .workflow import EnrollmentAndIdentificationWorkflow


def main() -> None:
    # Load environment variables
    load_dotenv()

    config = QuickstartConfig.from_env()
    EnrollmentAndIdentificationWorkflow(config).run()


if __name__ == "__main__":
    main()
