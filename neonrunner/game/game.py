# neonrunner/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_SPACE, K_ESCAPE
from .config import WIDTH, HEIGHT, FPS, COLOR_BG, COLOR_ACCENT, COLOR_DANGER, SEED_DEFAULT, LEADERBOARD_PATH
from .leaderboard import Leaderboard
from .renderer import draw_scene, draw_panel
from .session import RunSession, GamePhase

logger = logging.getLogger(__name__)

MENU_HELP = [
    "NEON RUNNER",
    "Tap to jump",
    "Hold in green zones to charge,",
    "release in the sweet spot to Super Dash",
    "Swipe right to dash",
    "",
    "Click or SPACE to start",
]


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Level seed. Omit for SEED_DEFAULT, use -1 for random each run.")
    p.add_argument("--leaderboard", type=str, default=LEADERBOARD_PATH,
                   help="JSON file holding the top distances.")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    return p.parse_args()


def _menu_lines(board: Leaderboard):
    lines = list(MENU_HELP)
    entries = board.load()
    if entries:
        lines.append("")
        lines.append("Best runs")
        for i, e in enumerate(entries[:5], start=1):
            lines.append(f"{i}. {e.distance}m   {e.date}")
    return lines


def _now() -> float:
    return pygame.time.get_ticks() / 1000.0


def run():
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Resolve seed: None -> SEED_DEFAULT; -1 -> random each run
    if args.seed is None:
        seed = SEED_DEFAULT
    elif args.seed == -1:
        seed = None
    else:
        seed = args.seed

    pygame.init()
    pygame.display.set_caption("Neon Runner")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("jetbrainsmono", 18)

    board = Leaderboard(args.leaderboard)
    session = RunSession(seed=seed, leaderboard=board)
    session.on_game_over(lambda score: print(f"Game over: {score}m (seed {session.seed})"))
    menu_lines = _menu_lines(board)

    def start():
        session.start(_now())

    while True:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                session.return_to_menu()
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    if session.phase is GamePhase.MENU:
                        pygame.quit(); sys.exit()
                    session.return_to_menu()
                    menu_lines = _menu_lines(board)
                elif event.key == K_SPACE and session.phase is not GamePhase.PLAYING:
                    start()
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if session.phase is GamePhase.PLAYING:
                    session.pointer_down(event.pos[0], event.pos[1], _now())
                else:
                    start()
            if event.type == pygame.MOUSEMOTION and session.phase is GamePhase.PLAYING:
                session.pointer_move(event.pos[0])
            if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                session.pointer_up(event.pos[0], _now())
            if event.type == pygame.WINDOWFOCUSLOST:
                session.pointer_cancel(_now())

        if session.running:
            session.tick(_now())

        # --- Render ---
        scene = session.scene()
        if scene is not None:
            draw_scene(screen, scene, font)
        else:
            screen.fill(COLOR_BG)

        if session.phase is GamePhase.MENU:
            draw_panel(screen, menu_lines, font, accent=COLOR_ACCENT)
        elif session.phase is GamePhase.GAME_OVER:
            lines = ["SYSTEM FAILURE", f"Distance: {session.final_score}m"]
            if session.last_rank is not None:
                lines.append(f"New #{session.last_rank} on the board")
            lines += ["", "REBOOT: click or SPACE", "ESC: menu"]
            draw_panel(screen, lines, font, accent=COLOR_DANGER)

        pygame.display.flip()


if __name__ == "__main__":
    run()
