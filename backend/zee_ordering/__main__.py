import uvicorn

from zee_ordering.config import settings


def main():
    uvicorn.run("zee_ordering.main:app", host=settings.APP_HOST, port=settings.APP_PORT)


if __name__ == "__main__":
    main()
