import os

from .main import create_app


def main() -> None:
    app = create_app()
    # threaded: each open event stream holds a worker thread.
    app.run(
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "5000")),
        debug=app.config["DEBUG"],
        threaded=True,
    )


if __name__ == "__main__":
    main()
