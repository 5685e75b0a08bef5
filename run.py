import os

from market_dashboard.app import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "8080")), debug=app.config.get("APP_ENV") != "production")
