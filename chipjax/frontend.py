"""pygame presentation, input and audio adapters for chipjax."""

import numpy as np
import pygame

from chipjax.machine import Chip8
from chipjax.logging import EmulatorLogger
from chipjax.rendering import chip8_display_to_rgb, create_color_scheme
from chipjax.decode import disassemble
from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, NUM_KEYS, TIMER_HZ

# 1 2 3 4 / Q W E R / A S D F / Z X C V -> 1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

BEEP_FREQUENCY = 440
SAMPLE_RATE = 44100


def make_beep(duration: float = 1 / TIMER_HZ * 4) -> pygame.mixer.Sound:
    """Square wave tone played on sound timer expiry."""
    t = np.arange(int(SAMPLE_RATE * duration)) / SAMPLE_RATE
    wave = (np.sign(np.sin(2 * np.pi * BEEP_FREQUENCY * t)) * 6000).astype(np.int16)
    # the mixer may open with more channels than requested
    channels = pygame.mixer.get_init()[2]
    if channels > 1:
        wave = np.repeat(wave[:, None], channels, axis=1)
    return pygame.sndarray.make_sound(wave)


def draw_overlay_text(surface, text_lines, position, font, bg_color=(0, 0, 0), text_color=(255, 255, 255), alpha=120):
    """Draw text with semi-transparent background overlay"""
    if not text_lines:
        return

    line_height = font.get_height()
    max_width = max(font.size(line)[0] for line in text_lines)
    overlay = pygame.Surface((max_width + 16, len(text_lines) * line_height + 8))
    overlay.set_alpha(alpha)
    overlay.fill(bg_color)
    surface.blit(overlay, position)

    x, y = position
    for i, line in enumerate(text_lines):
        text_surface = font.render(line, True, text_color)
        surface.blit(text_surface, (x + 8, y + 4 + i * line_height))


def run_emulator(
    rom_path: str,
    scale: int = 10,
    ipf: int = 10,
    fps: int = TIMER_HZ,
    color_scheme: str = "classic",
    couple_timers: bool = True,
    strict: bool = False,
    seed: int = 0,
    logger: EmulatorLogger = None,
):
    """Host loop: poll input, run instructions, repaint when dirty.

    Args:
        rom_path: Program file to load at 0x200
        scale: Window pixels per CHIP-8 pixel
        ipf: Instructions executed per frame
        fps: Frames per second of the host loop
        color_scheme: Name passed to ``create_color_scheme``
        couple_timers: Let timers tick per instruction instead of per frame
        strict: Stop on unknown opcodes
        seed: Random seed for CXNN
        logger: Logger shared with the machine

    Returns:
        The pixel grid at the time the window closed, indexed ``[x, y]``
    """
    logger = logger or EmulatorLogger()
    on_color, off_color = create_color_scheme(color_scheme)

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption(f"chipjax - {rom_path}")
    clock = pygame.time.Clock()

    beep = None
    try:
        pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        beep = make_beep()
    except pygame.error as e:
        logger.warning(f"Audio disabled: {e}")

    machine = Chip8(
        seed=seed,
        couple_timers=couple_timers,
        strict=strict,
        on_tone=beep.play if beep is not None else None,
        logger=logger,
    )

    keypad = [False] * NUM_KEYS
    running = True
    paused = False
    show_debug = False
    font = pygame.font.Font(None, 18)

    logger.info("Controls: ESC=Quit, P=Pause, BACKSPACE=Reset, F2=Debug")

    try:
        machine.load_rom(rom_path)
        while running:
            clock.tick(fps)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_p:
                        paused = not paused
                    elif event.key == pygame.K_F2:
                        show_debug = not show_debug
                    elif event.key == pygame.K_BACKSPACE:
                        machine.initialize()
                        machine.load_rom(rom_path)
                        logger.info("Reset")
                    elif event.key in KEY_MAP:
                        keypad[KEY_MAP[event.key]] = True
                elif event.type == pygame.KEYUP:
                    if event.key in KEY_MAP:
                        keypad[KEY_MAP[event.key]] = False

            if not paused:
                machine.set_keys(keypad)
                machine.run(ipf)
                if not couple_timers:
                    machine.tick_timers()

            if machine.display_dirty or show_debug:
                rgb = chip8_display_to_rgb(machine.consume_display(), scale, on_color, off_color)
                screen.blit(pygame.surfarray.make_surface(rgb.swapaxes(0, 1)), (0, 0))

                if show_debug:
                    pc = machine.pc
                    debug_lines = [
                        f"PC: 0x{pc:03X}  {disassemble(machine.peek_instruction(pc))}",
                        f"I: 0x{machine.I:03X}",
                        f"DT: {machine.delay_timer}  ST: {machine.sound_timer}",
                        " ".join(f"{int(v):02X}" for v in machine.V),
                        f"Status: {'PAUSED' if paused else 'RUNNING'}",
                    ]
                    draw_overlay_text(screen, debug_lines, (5, 5), font, alpha=100)

                pygame.display.flip()
    finally:
        pygame.quit()
        logger.log_session_end({"instructions": machine.steps})

    return machine.display
