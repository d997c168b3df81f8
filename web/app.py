"""Simple Flask web interface for model-docgen.

Upload a JSON model, generate its documentation site into a numbered job
folder, and browse the generated site.
"""

import json
import os
import shutil
from pathlib import Path
from flask import Flask, request, jsonify, render_template_string, send_from_directory, send_file

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from model_docgen.cli import generate_site
from model_docgen.domain.constants import INDEX_FILE, TOC_FILE
from model_docgen.domain.models import GenerateOptions
from model_docgen.error_report import build_failure_report
from model_docgen.introspection.loader import ModelLoadError

DEFAULT_UPLOAD_FOLDER = Path(os.environ.get('MODEL_DOCGEN_UPLOADS', Path(__file__).parent / 'uploads'))

JOB_FILE = 'job.json'

LANDING_PAGE = """\
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>model-docgen</title></head>
<body>
  <h1>model-docgen</h1>
  <form action="/api/generate" method="post" enctype="multipart/form-data">
    <input type="file" name="file" accept=".json">
    <input type="text" name="title" placeholder="Title">
    <button type="submit">Generate</button>
  </form>
  <ul>
  {% for job in jobs %}
    <li><a href="/sites/{{ job.job_id }}/">{{ job.filename }}</a> ({{ job.nodes }} nodes)</li>
  {% endfor %}
  </ul>
</body>
</html>
"""


def read_toc(output_dir: Path) -> dict:
    """Parse the ``define(...)`` wrapper of a generated toc.js."""
    text = (output_dir / TOC_FILE).read_text(encoding='utf-8').strip()
    if not (text.startswith('define(') and text.endswith(')')):
        raise ValueError(f"Unexpected {TOC_FILE} format")
    return json.loads(text[len('define('):-1])


def create_app(upload_folder: Path | str | None = None) -> Flask:
    app = Flask(__name__)
    uploads = Path(upload_folder) if upload_folder else DEFAULT_UPLOAD_FOLDER
    uploads.mkdir(parents=True, exist_ok=True)
    app.config['UPLOAD_FOLDER'] = uploads

    def get_next_job_id() -> int:
        """Get the next sequential job ID."""
        existing = [int(d.name) for d in uploads.iterdir() if d.is_dir() and d.name.isdigit()]
        return max(existing, default=0) + 1

    def list_job_records() -> list[dict]:
        jobs = []
        for d in sorted(uploads.iterdir(), key=lambda x: int(x.name) if x.name.isdigit() else 0, reverse=True):
            job_path = d / JOB_FILE
            if d.is_dir() and d.name.isdigit() and job_path.exists():
                with open(job_path, encoding='utf-8') as f:
                    jobs.append(json.load(f))
        return jobs

    @app.route('/')
    def index():
        return render_template_string(LANDING_PAGE, jobs=list_job_records())

    @app.route('/api/generate', methods=['POST'])
    def upload_and_generate():
        """Upload a JSON model and generate its site."""
        if 'file' not in request.files:
            return jsonify({'error': 'No file provided'}), 400

        file = request.files['file']
        if not file.filename or not file.filename.endswith('.json'):
            return jsonify({'error': 'Please upload a JSON model'}), 400

        job_id = get_next_job_id()
        job_folder = uploads / str(job_id)
        job_folder.mkdir(exist_ok=True)

        model_path = job_folder / Path(file.filename).name
        file.save(model_path)
        output_dir = job_folder / 'output'

        try:
            options = GenerateOptions(
                title=request.form.get('title') or None,
                render_unset=request.form.get('render_unset') == 'true',
                restrict_icons=True,
            )
            result = generate_site(str(model_path), str(output_dir), options)
        except ModelLoadError as e:
            return jsonify({'error': str(e), 'job_id': job_id}), 400
        except Exception as e:
            return jsonify({
                'error': str(e),
                'job_id': job_id,
                'report': build_failure_report(e).to_dict(),
            }), 500

        record = {
            'job_id': job_id,
            'filename': model_path.name,
            'nodes': result.nodes,
            'pages': result.pages,
            'icons': result.icons,
            'status': 'success',
        }
        with open(job_folder / JOB_FILE, 'w', encoding='utf-8') as f:
            json.dump(record, f, indent=2)
        return jsonify(record)

    @app.route('/api/jobs')
    def list_jobs():
        """List all generated sites."""
        return jsonify(list_job_records())

    @app.route('/api/jobs/<int:job_id>/toc')
    def get_toc(job_id: int):
        """Site index of a generated job."""
        output_dir = uploads / str(job_id) / 'output'
        if not (output_dir / TOC_FILE).exists():
            return jsonify({'error': 'Job not found'}), 404
        return jsonify(read_toc(output_dir))

    @app.route('/sites/<int:job_id>/')
    @app.route('/sites/<int:job_id>/<path:path>')
    def serve_site(job_id: int, path: str = INDEX_FILE):
        """Serve a generated site file."""
        output_dir = uploads / str(job_id) / 'output'
        if not output_dir.exists():
            return jsonify({'error': 'Job not found'}), 404
        return send_from_directory(output_dir.resolve(), path)

    @app.route('/api/jobs/<int:job_id>/download-all')
    def download_all(job_id: int):
        """Download a generated site as a ZIP file."""
        output_dir = uploads / str(job_id) / 'output'
        if not output_dir.exists():
            return jsonify({'error': 'Job not found'}), 404

        zip_path = uploads / str(job_id) / f'site_{job_id}.zip'
        shutil.make_archive(str(zip_path.with_suffix('')), 'zip', output_dir)

        return send_file(zip_path.resolve(), as_attachment=True, download_name=f'model_docs_{job_id}.zip')

    return app


if __name__ == '__main__':
    create_app().run(debug=True, port=5002)
