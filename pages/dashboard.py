from core.dispatcher import dispatch
from core.helpers import page_shell, render_footer

# Page config is set globally in app.py

ctx = page_shell("/dashboard")

view = dispatch(ctx.session.role)
view.dashboard(ctx)

render_footer()
