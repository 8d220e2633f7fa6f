"""Entry point that exposes every API group."""

from .alerting import Alerting
from .apm import APM
from .base import APIGroup
from .cases import Cases
from .connectors import Connectors
from .dataviews import DataViews
from .endpoint import EndpointManagement
from .fleet import Fleet
from .logstash import Logstash
from .ml import ML
from .roles import Roles
from .saved_objects import SavedObjects
from .security_ai_assistant import SecurityAIAssistant
from .security_detections import SecurityDetections
from .security_endpoint_management import SecurityEndpointManagement
from .security_exceptions import SecurityExceptions
from .short_url import ShortURL
from .spaces import Spaces
from .status import Status
from .task_manager import TaskManager
from .uptime import Uptime

GROUPS: dict[str, type[APIGroup]] = {
    "alerting": Alerting,
    "apm": APM,
    "cases": Cases,
    "connectors": Connectors,
    "dataviews": DataViews,
    "endpoint": EndpointManagement,
    "fleet": Fleet,
    "logstash": Logstash,
    "ml": ML,
    "roles": Roles,
    "saved_objects": SavedObjects,
    "security_ai_assistant": SecurityAIAssistant,
    "security_detections": SecurityDetections,
    "security_endpoint_management": SecurityEndpointManagement,
    "security_exceptions": SecurityExceptions,
    "short_url": ShortURL,
    "spaces": Spaces,
    "status": Status,
    "task_manager": TaskManager,
    "uptime": Uptime,
}


class API:
    """All Kibana API groups bound to one transport.

    ``transport`` is any object with ``perform(request) -> response``.
    """

    alerting: Alerting
    apm: APM
    cases: Cases
    connectors: Connectors
    dataviews: DataViews
    endpoint: EndpointManagement
    fleet: Fleet
    logstash: Logstash
    ml: ML
    roles: Roles
    saved_objects: SavedObjects
    security_ai_assistant: SecurityAIAssistant
    security_detections: SecurityDetections
    security_endpoint_management: SecurityEndpointManagement
    security_exceptions: SecurityExceptions
    short_url: ShortURL
    spaces: Spaces
    status: Status
    task_manager: TaskManager
    uptime: Uptime

    def __init__(self, transport):
        self._transport = transport
        for name, group_type in GROUPS.items():
            group = group_type(transport)
            group._bind_namespace(name)
            setattr(self, name, group)
