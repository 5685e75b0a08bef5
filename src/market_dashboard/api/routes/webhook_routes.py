from flask import current_app, request
from flask.views import MethodView
from flask_smorest import Blueprint

from market_dashboard.api.responses import success
from market_dashboard.schemas import PossibleOutputSchema, WebhookDataSchema, WebhookSchema, WebhookUpdateSchema
from market_dashboard.services import WebhookService

blp = Blueprint("webhooks", __name__, url_prefix="/api/webhooks", description="Webhook registry and receiver")
webhook_service = WebhookService()
webhook_schema = WebhookSchema()


@blp.route("/create")
class WebhookCreate(MethodView):
    @blp.doc(tags=["Webhooks"])
    @blp.arguments(WebhookSchema)
    def post(self, webhook_data):
        """Register a webhook and return its callback URL"""
        webhook = webhook_service.create(
            webhook_data,
            host_url=request.host_url,
            public_base_url=current_app.config.get("PUBLIC_BASE_URL"),
            production=current_app.config.get("APP_ENV") == "production",
        )
        return success(webhook_schema.dump(webhook), message="Webhook created successfully"), 201


@blp.route("/update/<string:webhook_id>")
class WebhookUpdate(MethodView):
    @blp.doc(tags=["Webhooks"])
    @blp.arguments(WebhookUpdateSchema)
    def put(self, webhook_data, webhook_id):
        webhook = webhook_service.update(webhook_id, webhook_data)
        return success(webhook_schema.dump(webhook), message="Webhook updated successfully")


@blp.route("/delete/<string:webhook_id>")
class WebhookDelete(MethodView):
    @blp.doc(tags=["Webhooks"])
    def delete(self, webhook_id):
        """Remove a webhook; alerts it already received are kept"""
        webhook_service.delete(webhook_id)
        return success(message="Webhook deleted successfully")


@blp.route("/list")
class WebhookList(MethodView):
    @blp.doc(tags=["Webhooks"])
    def get(self):
        """All webhooks, newest first"""
        return success(WebhookSchema(many=True).dump(webhook_service.list()))


@blp.route("/possible-outputs/list")
class PossibleOutputList(MethodView):
    @blp.doc(tags=["Webhooks"])
    def get(self):
        return success(webhook_service.possible_outputs())


@blp.route("/<string:webhook_id>/possible-output")
class PossibleOutput(MethodView):
    @blp.doc(tags=["Webhooks"])
    @blp.arguments(PossibleOutputSchema)
    def put(self, body, webhook_id):
        webhook = webhook_service.update_possible_output(webhook_id, body["possible_output"])
        return success(webhook_schema.dump(webhook), message="Possible output updated successfully")


@blp.route("/receive/<string:webhook_id>")
class WebhookReceive(MethodView):
    @blp.doc(tags=["Webhooks"])
    def post(self, webhook_id):
        """
        Alert callback. Accepts form-encoded or JSON bodies with comma-joined
        stocks and trigger_prices.
        """
        payload = request.form.to_dict() if request.form else request.get_json(silent=True)
        alert = webhook_service.receive(webhook_id, payload)
        return success(WebhookDataSchema().dump(alert), message="Webhook data received successfully")


@blp.route("/<string:webhook_id>")
class WebhookDetail(MethodView):
    @blp.doc(tags=["Webhooks"])
    def get(self, webhook_id):
        return success(webhook_schema.dump(webhook_service.get(webhook_id)))
