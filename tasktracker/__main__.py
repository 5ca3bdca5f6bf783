import uvicorn

from tasktracker import config


def main():
    uvicorn.run(
        "tasktracker.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.RELOAD,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
