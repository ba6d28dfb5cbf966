from mathboard.handlers.base import JsonHandler


class HealthHandler(JsonHandler):
    def get(self):
        self.write_json({"status": "ok"})
