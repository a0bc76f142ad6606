from django.utils.deprecation import MiddlewareMixin
from rest_framework.renderers import JSONRenderer

from apps.api.validation import validate_request_context, view_class_of
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="middleware")


class RequestValidationMiddleware(MiddlewareMixin):
    """
    Interceptor stage that runs the authorization gate before the routed
    API view is invoked. Non-API views (admin, health probes) pass through.
    """

    def process_view(self, request, view_func, view_args, view_kwargs):
        view_class = view_class_of(view_func)
        if view_class is None or not hasattr(view_class, "access_policy"):
            return None
        view_name = getattr(view_class, "__name__", str(view_class))
        response = validate_request_context(request, view_class, view_kwargs)
        if response is None:
            return None
        logger.info(
            "Request blocked by validation",
            view=view_name,
            method=getattr(request, "method", None),
            status=response.status_code,
        )
        # Responses built outside a DRF view still need a renderer
        response.accepted_renderer = JSONRenderer()
        response.accepted_media_type = "application/json"
        response.renderer_context = {"request": request, "response": response}
        return response
