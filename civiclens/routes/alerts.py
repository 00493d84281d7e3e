"""
Alert endpoints - explicitly triggered administrative e-mail alerts.
"""

import asyncio
import logging
import smtplib

from fastapi import APIRouter, Depends, HTTPException, status

from civiclens.models.alert import AlertReceipt, AlertRequest
from civiclens.services.alert_notifier import (
    AlertNotifier,
    NotifierNotConfiguredError,
    get_alert_notifier,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.post("", response_model=AlertReceipt, response_model_exclude_none=True)
async def send_alert(alert: AlertRequest, notifier: AlertNotifier = Depends(get_alert_notifier)):
    """
    Send an alert e-mail to the administrative recipient.

    Alerts below the configured severity threshold are not sent unless
    force is set.
    """
    eligible, reason = notifier.is_eligible(alert)
    if not eligible:
        logger.info(f"Alert not sent: {reason}")
        return AlertReceipt(status=AlertNotifier.STATUS_NOT_ELIGIBLE, reason=reason)

    try:
        loop = asyncio.get_running_loop()
        message_id = await loop.run_in_executor(None, notifier.send, alert)
    except NotifierNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"❌ POST /alerts - Alert delivery failed: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Alert delivery failed: {e}")

    return AlertReceipt(status=AlertNotifier.STATUS_SENT, message_id=message_id)
