# app/outbound/__init__.py
from .gateway import SendGateway, OutboundSendRequest, OutboundSendReceipt, SendStatus
from .dry_run import DryRunSendGateway
from .messenger import MessengerSendGateway
from .retry import RetryPolicy, NoRetry, CappedBackoffRetry, build_retry_policy
from .factory import build_send_gateway
