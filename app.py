"""Application entry point for ``flask run`` and ``flask shell``."""
import os
from postboard import create_app
from postboard.extensions import db
from postboard.models import User, Post, PostLike, Comment, Category
from postboard.services import get_services

app = create_app(os.getenv("FLASK_ENV"))


@app.shell_context_processor
def make_shell_context():
    """Models and services available in ``flask shell``."""
    return {
        "db": db,
        "services": get_services(),
        "User": User,
        "Post": Post,
        "PostLike": PostLike,
        "Comment": Comment,
        "Category": Category,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "8000")), debug=app.config["DEBUG"])
