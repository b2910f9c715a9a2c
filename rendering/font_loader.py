import pygame


class FontLoader:
    """Class responsible for loading and caching fonts."""
    cache = {}

    @staticmethod
    def load_font(size):
        """Load the default pygame font at ``size`` points."""
        if size in FontLoader.cache:
            return FontLoader.cache[size]
        else:
            if not pygame.font.get_init():
                pygame.font.init()
            try:
                font = pygame.font.Font(None, size)
                FontLoader.cache[size] = font
                return font
            except pygame.error as e:
                raise SystemExit(f"Couldn't load default font at size {size}") from e
