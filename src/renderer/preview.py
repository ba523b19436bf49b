# renderer/preview.py
import numpy as np
import pygame
from renderer.image_io import check_pixels

def to_surface(pixels: np.ndarray) -> pygame.Surface:
    """
    Convert a (height, width, 4) RGBA buffer to a pygame surface.
    Alpha is dropped; surfarray wants (width, height, 3).
    """
    pixels = check_pixels(pixels)
    return pygame.surfarray.make_surface(pixels[:, :, :3].swapaxes(0, 1))

def show_preview(pixels: np.ndarray, window_width: int = 800, caption: str = "Ray Tracer"):
    """
    Show a finished render in a window until it is closed or Escape is pressed.
    The image is scaled to window_width keeping its aspect ratio.
    """
    pixels = check_pixels(pixels)
    height, width = pixels.shape[:2]
    window_height = max(1, round(window_width * height / width))

    pygame.init()
    try:
        screen = pygame.display.set_mode((window_width, window_height))
        pygame.display.set_caption(caption)

        surf = to_surface(pixels)
        # Scale the render to fill the window.
        surf = pygame.transform.scale(surf, (window_width, window_height))

        clock = pygame.time.Clock()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
            screen.blit(surf, (0, 0))
            pygame.display.flip()
            clock.tick(30)
    finally:
        pygame.quit()
