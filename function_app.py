import azure.functions as func

from blogcms.shared.logging_utils import configure_logging
from blogcms.function_blueprints.http_add_post import bp as add_post_bp
from blogcms.function_blueprints.http_sync_tags import bp as sync_tags_bp
from blogcms.function_blueprints.timer_sync_tags import bp as timer_sync_tags_bp

configure_logging()

app = func.FunctionApp()
app.register_functions(add_post_bp)
app.register_functions(sync_tags_bp)
app.register_functions(timer_sync_tags_bp)
