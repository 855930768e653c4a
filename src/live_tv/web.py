"""Flask web interface for Live TV."""

import logging
from flask import Flask, Blueprint, Response, current_app, jsonify, request
from flask_cors import CORS
from flask_socketio import SocketIO, emit

from .config import config
from .embed import classify, share_url, social_share_links, to_embed_url
from .errors import ChannelError, FormatError, ValidationError
from .query import ALL, search_channels
from .store import ChannelStore
from .transfer import parse_import

logger = logging.getLogger(__name__)

socketio = SocketIO(cors_allowed_origins="*")
api = Blueprint('api', __name__, url_prefix='/api')

TRUE_VALUES = ('1', 'true', 'yes', 'on')


def get_store() -> ChannelStore:
    return current_app.extensions['channel_store']


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in TRUE_VALUES


def _channels_json(channels):
    return jsonify([c.to_dict() for c in channels])


def _player_data(channel, base_url: str) -> dict:
    link = share_url(base_url, channel.id)
    return {
        'channel': channel.to_dict(),
        'embed_url': to_embed_url(channel.url, channel.type),
        'share_url': link,
        'share_links': social_share_links(link, channel.name),
    }


def _base_url() -> str:
    return request.args.get('base_url') or request.url_root


@api.errorhandler(ChannelError)
def handle_channel_error(error):
    """Report core errors as JSON instead of letting them escape the request."""
    logger.warning(f"{type(error).__name__}: {error}")
    return jsonify({'error': str(error), 'kind': type(error).__name__}), error.status_code

# Channel Management
@api.route('/channels')
def list_channels():
    """Admin table view with search, category and type filters."""
    channels = get_store().filter(
        search_term=request.args.get('search', ''),
        category=request.args.get('category', ALL),
        type=request.args.get('type', ALL),
    )
    return _channels_json(channels)

@api.route('/channels/search')
def search():
    """Viewer search box."""
    return _channels_json(search_channels(get_store().list(), request.args.get('q', '')))

@api.route('/channels', methods=['POST'])
def add_channel():
    """Add a new channel."""
    data = request.get_json(silent=True)
    logger.info(f"Received channel data: {data}")
    if not data:
        raise ValidationError('No data provided')

    channel = get_store().add(data)
    return jsonify({'channel': channel.to_dict(), 'message': 'Channel added successfully!'}), 201

@api.route('/channels/<int:channel_id>')
def get_channel(channel_id):
    return jsonify(get_store().get(channel_id).to_dict())

@api.route('/channels/<int:channel_id>', methods=['PUT'])
def update_channel(channel_id):
    """Update a channel."""
    data = request.get_json(silent=True)
    if not data:
        raise ValidationError('No data provided')

    channel = get_store().update(channel_id, data)
    return jsonify({'channel': channel.to_dict(), 'message': 'Channel updated successfully!'})

@api.route('/channels/<int:channel_id>', methods=['DELETE'])
def delete_channel(channel_id):
    """Delete a channel."""
    channel = get_store().remove(channel_id)
    return jsonify({'channel': channel.to_dict(), 'message': 'Channel deleted successfully!'})

# Player
@api.route('/channels/<int:channel_id>/player')
def play_channel(channel_id):
    """Embed URL and share links for the selected channel."""
    return jsonify(_player_data(get_store().get(channel_id), _base_url()))

@api.route('/player')
def deep_link():
    """Resolve a ``?channel=<id>`` share link; unknown ids select nothing."""
    channel_id = request.args.get('channel')
    channel = get_store().find(channel_id) if channel_id else None
    if channel is None:
        return jsonify({'channel': None})
    return jsonify(_player_data(channel, _base_url()))

@api.route('/validate-url', methods=['POST'])
def validate_url():
    data = request.get_json(silent=True) or {}
    url = data.get('url', '')
    channel_type = data.get('type', '')
    return jsonify({
        'valid': classify(url, channel_type).valid,
        'embed_url': to_embed_url(url, channel_type),
    })

# Import / Export
@api.route('/export')
def export_channels():
    """Download all channels as a JSON backup file."""
    filename, document = get_store().export_document()
    return Response(
        document,
        mimetype='application/json',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )

@api.route('/import', methods=['POST'])
def import_channels():
    """Preview an import, or replace all channels when ``confirm`` is set."""
    store = get_store()
    upload = request.files.get('file')
    if upload is not None:
        document = upload.read()
        confirmed = _flag(request.form.get('confirm'))
    else:
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            document = body.get('channels')
            confirmed = _flag(body.get('confirm'))
        else:
            document = body
            confirmed = _flag(request.args.get('confirm'))

    if document is None:
        raise FormatError('No import document provided')

    if not confirmed:
        preview = parse_import(document, strict=store.strict_import)
        return jsonify({
            'imported': False,
            'accepted': len(preview.accepted),
            'rejected': preview.rejected_count,
            'message': f"Import {len(preview.accepted)} channels? This will replace your current channels.",
        })

    result = store.import_channels(document)
    return jsonify({
        'imported': True,
        'accepted': len(result.accepted),
        'rejected': result.rejected_count,
        'message': f"{len(result.accepted)} channels imported successfully!",
    })

@api.route('/backup', methods=['POST'])
def backup():
    snapshot = get_store().backup()
    return jsonify({'timestamp': snapshot['timestamp'], 'channels': len(snapshot['channels']),
                    'message': 'Backup created successfully!'})

@api.route('/clear', methods=['POST'])
def clear_all():
    """Clear all channels and history. Irreversible, so it must be confirmed."""
    data = request.get_json(silent=True) or {}
    if not _flag(data.get('confirm')):
        raise ValidationError('Confirmation required to clear all data')
    get_store().clear()
    return jsonify({'message': 'All data cleared successfully!'})

@api.route('/refresh', methods=['POST'])
def refresh():
    store = get_store()
    channels = store.refresh()
    return jsonify({
        'channels': len(channels),
        'source': store.load_source,
        'warning': store.load_warning,
        'message': 'Data refreshed successfully!',
    })

# Dashboard
@api.route('/stats')
def stats():
    return jsonify(get_store().stats())

@api.route('/categories')
def categories():
    return jsonify(get_store().categories())

@api.route('/activity')
def activity():
    """Recent activity, newest first."""
    limit = request.args.get('limit', default=config.RECENT_ACTIVITY_LIMIT, type=int)
    return jsonify([a.to_dict() for a in get_store().activity.recent(limit)])

@api.route('/backups')
def backup_history():
    return jsonify([r.to_dict() for r in get_store().backups.records()])

# WebSocket events
@socketio.on('connect')
def handle_connect():
    """Handle client connection."""
    logger.info("Client connected")
    emit('connected', {'message': 'Connected to Live TV'})

@socketio.on('request_channels')
def handle_channels_request():
    emit('channels', [c.to_dict() for c in get_store().list()])


def broadcast_change(action, channel):
    """Push committed store changes to connected clients."""
    socketio.emit('channels_updated', {
        'action': action,
        'channel': channel.to_dict() if channel else None,
    })


def create_app(store: ChannelStore) -> Flask:
    """Build the Flask app around an already constructed store."""
    app = Flask(__name__)
    app.config['SECRET_KEY'] = config.SECRET_KEY
    app.extensions['channel_store'] = store
    app.register_blueprint(api)
    CORS(app)
    socketio.init_app(app)
    store.subscribe(broadcast_change)
    return app
