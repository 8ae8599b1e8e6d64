"""Run the API with uvicorn: python -m social_posts"""

import uvicorn

from social_posts.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("social_posts.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
