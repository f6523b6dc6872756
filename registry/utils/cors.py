"""
CORS Configuration
Centralized CORS settings for the application
"""
import os

# Session cookies need credentialed requests, which browsers refuse with a
# wildcard origin, so origins are listed explicitly.
CORS_CONFIG = {
    "origins": [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",") if o.strip()],
    "methods": ["GET", "POST", "PUT", "OPTIONS", "PATCH"],
    "allow_headers": [
        "Content-Type",
        "X-Requested-With",
        "Accept",
        "Origin",
    ],
    "expose_headers": [
        "Content-Type",
    ],
    "supports_credentials": True,
    "max_age": 86400,  # 24 hours
}


def init_cors(app):
    """
    Initialize CORS for the Flask application
    """
    from flask_cors import CORS

    CORS(app,
         resources={r"/api/*": {"origins": CORS_CONFIG["origins"]}},
         methods=CORS_CONFIG["methods"],
         allow_headers=CORS_CONFIG["allow_headers"],
         expose_headers=CORS_CONFIG["expose_headers"],
         supports_credentials=CORS_CONFIG["supports_credentials"],
         max_age=CORS_CONFIG["max_age"])

    app.logger.info("CORS enabled for %s", ", ".join(CORS_CONFIG["origins"]))
