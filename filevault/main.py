import uvicorn

from filevault.configs.settings import settings
from filevault.configs.setup import create_app

app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "filevault.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.APP_ENV == "dev",
    )
