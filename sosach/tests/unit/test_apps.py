from unittest import TestCase
from unittest.mock import patch

from sosach.apps import _is_serving_process


class IsServingProcessTests(TestCase):
    def test_wsgi_server(self):
        with patch("sosach.apps.sys.argv", ["gunicorn", "sosach_project.wsgi"]):
            self.assertTrue(_is_serving_process())

    def test_other_management_command(self):
        with patch("sosach.apps.sys.argv", ["manage.py", "ensure_indexes"]):
            self.assertFalse(_is_serving_process())

    def test_runserver_parent_process(self):
        with patch("sosach.apps.sys.argv", ["manage.py", "runserver"]), patch.dict("os.environ", {}, clear=True):
            self.assertFalse(_is_serving_process())

    def test_runserver_reloaded_child(self):
        with patch("sosach.apps.sys.argv", ["manage.py", "runserver"]), patch.dict("os.environ", {"RUN_MAIN": "true"}):
            self.assertTrue(_is_serving_process())

    def test_runserver_without_reload(self):
        with patch("sosach.apps.sys.argv", ["manage.py", "runserver", "--noreload"]):
            self.assertTrue(_is_serving_process())
