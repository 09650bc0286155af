# backend/wsgi.py
"""
Process entry point.

    <wsgi server> wsgi:app       # production
    python wsgi.py               # local, listens on $PORT (default 5000)
"""
import atexit

from shopledger import create_app
from shopledger.extensions import db

app = create_app()


@atexit.register
def _release_pool():
    # Return pooled connections to the database on interpreter shutdown
    with app.app_context():
        db.engine.dispose()


if __name__ == "__main__":
    app.logger.info("Shop API listening on port %s", app.config["PORT"])
    app.run(host="0.0.0.0", port=app.config["PORT"])
