# backend/wsgi.py
# Entry point for `flask --app wsgi run` and WSGI servers.

from denimtrack import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.config["BACKEND_PORT"])
