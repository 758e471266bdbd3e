"""
REST API for the lesson scheduler.
Provides HTTP endpoints to build a month schedule and exchange roster CSV files.
"""
import os
import logging
import time
from flask import Flask, Response, request, jsonify, abort
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from werkzeug.utils import secure_filename

from .errors import InvalidInput
from .data.converter import DataConverter
from .data.roster import parse_roster_csv, roster_template
from .scheduler import schedule

logger = logging.getLogger(__name__)

# Create Flask app
app = Flask(__name__)
CORS(app)  # Enable CORS for all routes

# Configure app
app.config['MAX_CONTENT_LENGTH'] = int(os.environ.get('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))
app.json.ensure_ascii = False

converter = DataConverter()


def csv_response(content: str, filename: str) -> Response:
    """Build a CSV download response."""
    return Response(
        content,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={secure_filename(filename)}'}
    )


def _schedule_from_request():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        abort(400, description="Request body must be a JSON object")

    year = payload.get('year')
    month = payload.get('month')
    students = converter.students_from_records(payload.get('students', []))

    return schedule(year, month, students), students


@app.errorhandler(InvalidInput)
def handle_invalid_input(error):
    logger.warning(f"Rejected request: {error.message}")
    return jsonify({'error': error.message, 'status': 400}), 400


@app.errorhandler(HTTPException)
def handle_http_error(error):
    return jsonify({'error': error.description, 'status': error.code}), error.code


@app.errorhandler(Exception)
def handle_unexpected_error(error):
    logger.exception(f"Unhandled error: {error}")
    return jsonify({'error': 'Internal server error', 'status': 500}), 500


@app.route('/api/v1/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'timestamp': time.time()
    })


@app.route('/api/v1/schedule', methods=['POST'])
def create_schedule():
    """Build a month schedule from a JSON roster."""
    result, students = _schedule_from_request()
    logger.info(f"Scheduled {result.assigned_count} students for {result.year}-{result.month:02d}")
    return jsonify(converter.result_to_dict(result, students))


@app.route('/api/v1/schedule/csv', methods=['POST'])
def download_schedule():
    """Build a month schedule and return it as a CSV file."""
    result, students = _schedule_from_request()
    return csv_response(
        converter.to_schedule_csv(result, students),
        converter.schedule_filename(result.year, result.month)
    )


@app.route('/api/v1/roster/template', methods=['GET'])
def download_template():
    """Download the example roster CSV."""
    return csv_response(roster_template(), 'student_template.csv')


@app.route('/api/v1/roster/import', methods=['POST'])
def import_roster():
    """Parse an uploaded roster CSV file (or raw CSV body)."""
    if 'file' in request.files:
        upload = request.files['file']
        text = upload.read().decode('utf-8-sig', errors='replace')
    else:
        text = request.get_data(as_text=True)

    if not text.strip():
        abort(400, description="No roster data provided")

    roster = parse_roster_csv(text)
    return jsonify({
        'students': [converter.student_to_dict(s) for s in roster.students],
        'skipped': [e.to_dict() for e in roster.skipped]
    })


def create_app():
    """Create the Flask application."""
    return app


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port)
