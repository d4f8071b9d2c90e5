"""
User directory.

Any logged-in user may list users (task assignment needs it).
The password hash is excluded by User.to_dict() and never serialized.
"""

from flask import Blueprint, jsonify

from ...security import gated
from ...store import entity_store
from ...utils import as_json_list


users_bp = Blueprint(
    "users",
    __name__,
    url_prefix="/api/users",
)


# ---------------------------------------------------------------------
# LIST USERS
# ---------------------------------------------------------------------

@users_bp.route("", methods=["GET"])
@gated
def list_users(principal):
    return jsonify(as_json_list(entity_store().list_users()))
