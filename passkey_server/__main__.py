# (c) Copyright Datacraft, 2026
import uvicorn

from passkey_server.config import get_settings
from passkey_server.main import create_app


def main():
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
