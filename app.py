import logging
from flask import Flask, jsonify, request

from tracker_sync import state as store
from tracker_sync.checklist import Checklist
from tracker_sync.config import SERVER_PORT, SERVER_VERSION
from tracker_sync.current_run import CurrentRunController
from tracker_sync.errors import NavigationError, TrackerSyncError
from tracker_sync.fetchers.boxart import BoxartResolver
from tracker_sync.fetchers.tracker import TrackerFetcher
from tracker_sync.sync import ScheduleSync
from tracker_sync.utils import setup_logging

logger = logging.getLogger(__name__)

def create_app(sync, controller, checklist):
    app = Flask(__name__)

    def navigation_result(changed):
        return jsonify({"changed": changed, "current_run": store.get_current_run()})

    # ================= PUBLISHED STATE =================
    @app.route('/api/schedule')
    def api_schedule():
        return jsonify(store.get_schedule())

    @app.route('/api/current_run')
    def api_current_run():
        return jsonify(store.get_current_run())

    @app.route('/api/state')
    def api_state():
        snap = store.snapshot()
        return jsonify({
            "version": SERVER_VERSION,
            "schedule_version": snap['schedule_version'],
            "current_run_version": snap['current_run_version'],
            "run_count": len(snap['schedule']),
            "current_order": snap['current_run'].get('order'),
        })

    # ================= DASHBOARD COMMANDS =================
    @app.route('/api/update_schedule', methods=['POST'])
    def api_update_schedule():
        try:
            updated = sync.trigger_update()
        except TrackerSyncError as e:
            return jsonify({"error": str(e)}), 502
        return jsonify({"updated": updated})

    @app.route('/api/next_run', methods=['POST'])
    def api_next_run():
        try: changed = controller.advance()
        except NavigationError as e: return jsonify({"error": str(e)}), 409
        return navigation_result(changed)

    @app.route('/api/previous_run', methods=['POST'])
    def api_previous_run():
        try: changed = controller.retreat()
        except NavigationError as e: return jsonify({"error": str(e)}), 409
        return navigation_result(changed)

    @app.route('/api/current_run', methods=['POST'])
    def api_set_current_run():
        d = request.get_json(silent=True)
        if not isinstance(d, dict): d = {}
        order = d.get('order')
        if not isinstance(order, int) or isinstance(order, bool):
            return jsonify({"error": "order must be an integer"}), 400
        try: changed = controller.jump_to_order(order)
        except NavigationError as e: return jsonify({"error": str(e)}), 404
        return navigation_result(changed)

    # ================= CHECKLIST =================
    @app.route('/api/checklist')
    def api_checklist():
        return jsonify(checklist.snapshot())

    @app.route('/api/checklist', methods=['POST'])
    def api_toggle_checklist():
        d = request.get_json(silent=True)
        item = d.get('item') if isinstance(d, dict) else None
        if not isinstance(item, str):
            return jsonify({"error": "item must be a string"}), 400
        try: checklist.toggle(item)
        except KeyError: return jsonify({"error": f"unknown checklist item {item!r}"}), 404
        return jsonify(checklist.snapshot())

    return app

def build_services():
    checklist = Checklist()
    controller = CurrentRunController(BoxartResolver(), checklist)
    sync = ScheduleSync(TrackerFetcher(), controller)
    return sync, controller, checklist

if __name__ == "__main__":
    setup_logging()
    sync, controller, checklist = build_services()
    sync.start()
    app = create_app(sync, controller, checklist)
    app.run(host='0.0.0.0', port=SERVER_PORT)
