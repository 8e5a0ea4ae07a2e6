"""Allow-list store and authorization evaluator."""

from graphlinker.access.evaluator import AccessEvaluator
from graphlinker.access.models import AllowedAccount, AuthorizationConfig, AzureADConfig
from graphlinker.access.patterns import ReceiverPattern, compile_patterns
from graphlinker.access.store import load_authorization_config, load_gateway_config

__all__ = [
    "AccessEvaluator",
    "AllowedAccount",
    "AuthorizationConfig",
    "AzureADConfig",
    "ReceiverPattern",
    "compile_patterns",
    "load_authorization_config",
    "load_gateway_config",
]
