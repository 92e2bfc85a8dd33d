from skincare_app.routes.auth import auth_bp
from skincare_app.api.account.details import account_bp
from skincare_app.api.catalog.services import services_bp
from skincare_app.api.catalog.therapists import therapists_bp
from skincare_app.api.booking.slots import slots_bp
from skincare_app.api.booking.shifts import shifts_bp
from skincare_app.api.booking.appointments import appointments_bp
from skincare_app.api.booking.transactions import transactions_bp
from skincare_app.api.payments.methods import payment_methods_bp
from skincare_app.api.content.feedback import feedback_bp
from skincare_app.api.content.blogs import blogs_bp
from skincare_app.api.quiz.questions import questions_bp
from skincare_app.api.quiz.scorebands import scorebands_bp
from skincare_app.api.quiz.roadmaps import roadmaps_bp
from skincare_app.api.quiz.user_quiz import user_quiz_bp
from flask import Flask, send_from_directory
from flask_cors import CORS
from dotenv import load_dotenv
import os

load_dotenv()
from skincare_app.config import Config  # noqa: E402
from skincare_app.extensions import db  # noqa: E402
from skincare_app.utils.errors import register_error_handlers  # noqa: E402


def create_app():
    app = Flask(__name__)
    try:
        app.config.from_object(Config)
        app.logger.setLevel(app.config["LOG_LEVEL"])

        CORS(
            app,
            origins=[app.config["CORS_ORIGIN"]],
            supports_credentials=True,
            methods=app.config["CORS_METHODS"],
            allow_headers=["Content-Type", "Authorization"],
        )

        db.init_app(app)
        register_error_handlers(app)

        blueprints = [
            auth_bp,
            account_bp,
            services_bp,
            therapists_bp,
            slots_bp,
            shifts_bp,
            appointments_bp,
            transactions_bp,
            payment_methods_bp,
            feedback_bp,
            blogs_bp,
            questions_bp,
            scorebands_bp,
            roadmaps_bp,
            user_quiz_bp,
        ]

        for bp in blueprints:
            app.register_blueprint(bp)
            app.logger.debug(f"  ✓ {bp.name} registered")

        @app.route("/")
        def home():
            return {"status": "ok", "message": "Backend is running!"}, 200

        @app.route("/images/<path:filename>")
        def uploaded_image(filename):
            """Serve images stored in the local upload folder."""
            return send_from_directory(app.config["UPLOAD_FOLDER"], filename)

        app.logger.debug(f"Total routes registered: {len(list(app.url_map.iter_rules()))}")

    except Exception as e:
        app.logger.exception(f"Error during app creation: {e}")
        raise

    return app


app = create_app()


if __name__ == "__main__":
    # Create a .env containing:
    #       MYSQL_PUBLIC_URL= mysql+pymysql://<USER>:<PASSWORD>@<HOST>:<PORT>/skincare_app  # noqa: E501
    # then run `python init_db.py` once to create the tables.

    port = int(os.environ.get("PORT", 5000))
    app.run(
        host="0.0.0.0", port=port, debug=os.environ.get("FLASK_ENV") != "production"
    )
