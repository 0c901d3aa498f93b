from flask import request, g


def access_middleware(app):
    @app.before_request
    def load_identity():
        # The access proxy in front of the app authenticates editors and
        # forwards their email in a header; absent for public visitors.
        header = app.config["ACCESS_EMAIL_HEADER"]
        email = request.headers.get(header)
        g.current_user = email.strip() if email else None
