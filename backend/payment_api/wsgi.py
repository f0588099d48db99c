import atexit

from .app import create_app

app = create_app()
atexit.register(app.extensions["stores"].close)


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.config["PORT"])
