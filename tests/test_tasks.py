# tests/test_tasks.py

def export_widget(widget_id):
    """Job target scheduled by widgets."""
    return widget_id

def send_digest(report_id, recipients=None):
    """Job target scheduled by reports."""
    return report_id, recipients or []
