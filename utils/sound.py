"""Scan feedback sounds"""

import logging
from typing import Optional

import pygame

from utils.file_handler import resource_path

logger = logging.getLogger(__name__)


class SoundPlayer:
    """Plays success/error sounds; missing audio degrades to silence"""

    def __init__(self, success_file: str, error_file: str, enabled: bool = True):
        self.enabled = enabled
        self.success_sound: Optional["pygame.mixer.Sound"] = None
        self.error_sound: Optional["pygame.mixer.Sound"] = None
        if not enabled:
            return
        try:
            pygame.mixer.init()
            self.success_sound = pygame.mixer.Sound(resource_path(success_file))
            self.error_sound = pygame.mixer.Sound(resource_path(error_file))
        except (pygame.error, FileNotFoundError) as e:
            logger.warning("Sound files could not be loaded: %s", e)
            self.success_sound = self.error_sound = None

    def play_success(self):
        if self.success_sound:
            self.success_sound.play()

    def play_error(self):
        if self.error_sound:
            self.error_sound.play()

    def close(self):
        if self.enabled and pygame.mixer.get_init():
            pygame.mixer.quit()
