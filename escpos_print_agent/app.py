"""
ESC/POS Print Agent - Main Application
======================================

Local HTTP agent that prints tickets and barcodes on an ESC/POS receipt
printer through the host print spooler.

Run: python -m escpos_print_agent
"""

import atexit
import platform
import socket
import sys
from datetime import datetime
from typing import Any, Dict, Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS

from . import __version__
from . import config as agent_config
from .encoder import ESCPOSEncoder
from .exceptions import SessionError, ValidationError
from .logging_config import get_logger, setup_logging
from .models import BarcodeJob, TicketJob
from .session import SpoolerSession
from .spoolers import create_spooler

logger = get_logger(__name__)

agent = Blueprint('agent', __name__)

SESSION_KEY = 'spooler_session'

# =============================================================================
# Application Setup
# =============================================================================

def create_session(settings: Dict[str, Any]) -> SpoolerSession:
    """Build the spooler session described by the settings."""
    spooler = create_spooler(settings['SPOOLER'], dummy_dir=settings.get('DUMMY_DIR', ''))
    return SpoolerSession(
        spooler,
        device_name=settings.get('PRINTER_NAME') or None,
        document_name=settings.get('DOCUMENT_NAME', 'Print Job'),
    )


def create_app(session: Optional[SpoolerSession] = None,
               config: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Create the agent's Flask application.

    Args:
        session: Spooler session the routes print through; built from the
            configuration when omitted
        config: Overrides for the settings in config.py
    """
    settings = agent_config.as_dict()
    settings.update(config or {})

    app = Flask(__name__)
    app.config.update(settings)
    CORS(app, max_age=settings['CORS_MAX_AGE'], send_wildcard=True)

    if session is None:
        session = create_session(settings)
    app.extensions[SESSION_KEY] = session

    app.register_blueprint(agent)
    return app


def get_session() -> SpoolerSession:
    """Session of the current application."""
    return current_app.extensions[SESSION_KEY]


def _check_api_key() -> bool:
    """Validate API key from request (always valid when no key is configured)."""
    api_key = current_app.config.get('API_KEY')
    if not api_key:
        return True

    data = request.get_json(silent=True) or {}
    auth_header = request.headers.get('Authorization', '')

    # Check body
    if isinstance(data, dict) and data.get('api_key') == api_key:
        return True

    # Check header (Bearer token)
    if auth_header.startswith('Bearer ') and auth_header[7:] == api_key:
        return True

    return False


def _error(message: str, status: int):
    return jsonify({'success': False, 'error': message}), status


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("JSON object body required")
    return data


@agent.errorhandler(ValidationError)
def _validation_error(error: ValidationError):
    return _error(error.message, error.http_status)


@agent.errorhandler(SessionError)
def _session_error(error: SessionError):
    return jsonify(error.to_dict()), error.http_status


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@agent.route('/ping', methods=['GET'])
def ping():
    """Health check."""
    session = get_session()
    response = {'status': 'ok'}

    if session.is_open:
        response['message'] = 'Print Agent running (printer connected)'
        response['printer'] = session.device.name
    else:
        response['message'] = 'Print Agent running (no printer detected)'

    return jsonify(response)


@agent.route('/health', methods=['GET'])
def health():
    """Health check with system info."""
    return jsonify({
        'status': 'online',
        'version': __version__,
        'hostname': socket.gethostname(),
        'platform': platform.system(),
        'python': sys.version.split()[0],
        'session': get_session().describe(),
        'timestamp': datetime.now().isoformat(),
    })


@agent.route('/api', methods=['GET'])
def api_info():
    """API info (JSON)."""
    return jsonify({
        'service': 'ESC/POS Print Agent',
        'version': __version__,
        'status': 'running',
        'endpoints': {
            'ping': '/ping',
            'health': '/health',
            'printers': '/printers',
            'ticket': '/print/ticket',
            'barcode': '/print/barcode',
        }
    })


# =============================================================================
# Printers
# =============================================================================

@agent.route('/printers', methods=['GET'])
def list_printers():
    """List printers registered with the host spooler."""
    devices = get_session().list_devices()
    return jsonify({
        'success': True,
        'printers': [d.name for d in devices],
        'count': len(devices),
    })


# =============================================================================
# Printing
# =============================================================================

@agent.route('/print/ticket', methods=['POST'])
def print_ticket():
    """Print a ticket: {"lines": ["...", ...]}."""
    if not _check_api_key():
        return _error('Invalid API key', 401)

    job = TicketJob.from_dict(_json_body())
    stream = ESCPOSEncoder.encode_job(job)
    sent = get_session().submit(stream)

    logger.info(f"Ticket printed ({len(job.lines)} line(s))")
    return jsonify({'success': True, 'bytes_sent': sent})


@agent.route('/print/barcode', methods=['POST'])
def print_barcode():
    """Print barcodes: {"codes": "..." | [...], "copies": 1, "text": ""}."""
    if not _check_api_key():
        return _error('Invalid API key', 401)

    job = BarcodeJob.from_dict(_json_body())
    stream = ESCPOSEncoder.encode_job(job)
    sent = get_session().submit(stream)

    logger.info(f"{len(job.codes)} code(s) printed x {job.copies} copy(ies)")
    return jsonify({
        'success': True,
        'codes': job.codes,
        'copies': job.copies,
        'bytes_sent': sent,
    })


# =============================================================================
# Main
# =============================================================================

def main():
    """Run the agent."""
    setup_logging(agent_config.LOG_LEVEL, agent_config.LOG_DIR or None)

    print("=" * 60)
    print("  ESC/POS Print Agent")
    print("=" * 60)
    print(f"  Version: {__version__}")
    print(f"  Port: {agent_config.PORT}")
    print(f"  Spooler: {agent_config.SPOOLER}")
    print(f"  Printer: {agent_config.PRINTER_NAME or '(first available)'}")
    print("=" * 60)
    print("  API Endpoints:")
    print("    GET  /ping                            - Health check")
    print("    GET  /health                          - System info")
    print("    GET  /printers                        - List printers")
    print("    POST /print/ticket                    - Print ticket lines")
    print("    POST /print/barcode                   - Print EAN-13 barcodes")
    print("=" * 60)

    app = create_app()
    session = app.extensions[SESSION_KEY]
    atexit.register(session.close)

    # Try to open the printer now; submit retries lazily if this fails
    try:
        session.open()
    except SessionError as e:
        logger.warning(f"No printer opened at startup: {e}")

    app.run(host=agent_config.HOST, port=agent_config.PORT, debug=agent_config.DEBUG, threaded=True)


if __name__ == '__main__':
    main()
