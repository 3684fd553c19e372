# Click Circle Sketch
# Draws a soft red circle wherever the mouse was last pressed

CIRCLE_RADIUS = 30
CIRCLE_COLOR = (255, 100, 100)  # soft red


class AppState:
    """Circle visibility and the last click position"""
    def __init__(self):
        self.show_circle = False
        self.circle_x = 0.0
        self.circle_y = 0.0


state = AppState()


def setup(screen, etc):
    """Setup function called once when the sketch loads"""
    screen.background(0)  # black background


def draw(screen, etc):
    """Draw function called every frame"""
    if state.show_circle:
        screen.set_color(CIRCLE_COLOR)
        screen.draw_circle(state.circle_x, state.circle_y, CIRCLE_RADIUS)


def mouse_pressed(x, y, button, etc):
    """Called on every mouse press, whichever button"""
    state.circle_x = x
    state.circle_y = y
    state.show_circle = True
