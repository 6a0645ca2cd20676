"""WSGI entry point for the grading API (``gunicorn wsgi:app``)."""

from src.school_grading.school_grading.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run()
