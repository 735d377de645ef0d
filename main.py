from mock_api.api_server import create_app
from mock_api.config import MockServerConfig
from mock_api.lifecycle import MockServer, setup_logging

config = MockServerConfig()
setup_logging(config)

app = create_app(config)


def main():
    # uvicorn handles SIGINT/SIGTERM; the lifespan writes the shutdown entry
    MockServer(app, config).run()


if __name__ == "__main__":
    main()
