"""Ad placement and application settings."""

from flask import jsonify
from flask_login import current_user

from audit import record_activity
from errors import NotFound, found
from models import to_json
from permissions import admin_required
from schemas import AdSettingIn, AdSettingPatch, AppSettingIn, parse_body, values
from storage import get_storage

from . import bp

CATEGORY = "Settings"


# ---------- ads ----------
@bp.route("/ad-settings")
@admin_required
def list_ad_settings():
    return jsonify([to_json(s) for s in get_storage().get_ad_settings()])


@bp.route("/ad-settings/<int:setting_id>")
@admin_required
def get_ad_setting(setting_id: int):
    return jsonify(to_json(found(get_storage().get_ad_setting(setting_id), "Ad setting")))


@bp.route("/ad-settings", methods=["POST"])
@admin_required
def create_ad_setting():
    data = {**values(parse_body(AdSettingIn)), "updated_by": current_user.id}
    setting = get_storage().create_ad_setting(data)
    record_activity(current_user.id, f"Created {setting.ad_type} ad setting", CATEGORY)
    return jsonify(to_json(setting)), 201


@bp.route("/ad-settings/<int:setting_id>", methods=["PUT"])
@admin_required
def update_ad_setting(setting_id: int):
    changes = {**values(parse_body(AdSettingPatch), partial=True), "updated_by": current_user.id}
    setting = found(get_storage().update_ad_setting(setting_id, changes), "Ad setting")
    record_activity(current_user.id, f"Updated ad setting #{setting.id}", CATEGORY)
    return jsonify(to_json(setting))


# ---------- app settings ----------
@bp.route("/app-settings/<category>")
@admin_required
def list_app_settings(category: str):
    return jsonify([to_json(s) for s in get_storage().get_app_settings_by_category(category)])


@bp.route("/app-settings/<category>/<key>")
@admin_required
def get_app_setting(category: str, key: str):
    return jsonify(to_json(found(get_storage().get_app_setting(category, key), "Setting")))


@bp.route("/app-settings", methods=["POST"])
@admin_required
def upsert_app_setting():
    body = parse_body(AppSettingIn)
    setting, created = get_storage().save_app_setting(body.category, body.key, body.value, current_user.id)
    record_activity(current_user.id, f"Set {setting.category}.{setting.key}", CATEGORY)
    return jsonify(to_json(setting)), 201 if created else 200


@bp.route("/app-settings/<int:setting_id>", methods=["DELETE"])
@admin_required
def delete_app_setting(setting_id: int):
    if not get_storage().delete_app_setting(setting_id):
        raise NotFound("Setting not found")
    record_activity(current_user.id, f"Deleted setting #{setting_id}", CATEGORY)
    return "", 204
