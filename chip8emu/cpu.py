# CHIP8 instruction interpreter: fetch, decode and execute one instruction per step.
# CPU - Cowgods CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#3.0
#----------------------------------------------------------------------------------------------
# Every instruction is 2 bytes, big-endian. PC is advanced by 2 *before* the handler runs,
# so jumps/calls/returns simply overwrite it and skips add another 2 on top.

from collections import namedtuple

from .constants import (
    DISPLAY_HEIGHT, DISPLAY_WIDTH, FONT_SPRITE_SIZE, KEY_COUNT, MEMORY_SIZE, STACK_SIZE,
)
from .errors import StackOverflowError, StackUnderflowError
from .logger import log, logger
from .machine import KeyWait

Opcode = namedtuple("Opcode", "raw kind x y n nn nnn")


def decode(opcode):
    return Opcode(
        raw=opcode,
        kind=(opcode & 0xF000) >> 12,
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        n=opcode & 0x000F,
        nn=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )


def fetch(m):
    return (m.memory[m.pc & 0xFFF] << 8) | m.memory[(m.pc + 1) & 0xFFF]


class Interpreter:

    def __init__(self):
        self.cycles = 0

        # dispatch table, checked in order
        self.opcodes = [
            (0xFFFF, 0x00E0, self.op_CLS),
            (0xFFFF, 0x00EE, self.op_RET),

            (0xF000, 0x1000, self.op_JP),
            (0xF000, 0x2000, self.op_CALL),
            (0xF000, 0x3000, self.op_SE_Vx_kk),
            (0xF000, 0x4000, self.op_SNE_Vx_kk),
            (0xF00F, 0x5000, self.op_SE_Vx_Vy),
            (0xF000, 0x6000, self.op_LD_Vx_kk),
            (0xF000, 0x7000, self.op_ADD_Vx_kk),

            (0xF00F, 0x8000, self.op_LD_Vx_Vy),
            (0xF00F, 0x8001, self.op_OR),
            (0xF00F, 0x8002, self.op_AND),
            (0xF00F, 0x8003, self.op_XOR),
            (0xF00F, 0x8004, self.op_ADD),
            (0xF00F, 0x8005, self.op_SUB),
            (0xF00F, 0x8006, self.op_SHR),
            (0xF00F, 0x8007, self.op_SUBN),
            (0xF00F, 0x800E, self.op_SHL),

            (0xF00F, 0x9000, self.op_SNE_Vx_Vy),
            (0xF000, 0xA000, self.op_LD_I),
            (0xF000, 0xB000, self.op_JP_V0),
            (0xF000, 0xC000, self.op_RND),
            (0xF000, 0xD000, self.op_DRW),

            (0xF0FF, 0xE09E, self.op_SKP),
            (0xF0FF, 0xE0A1, self.op_SKNP),

            (0xF0FF, 0xF007, self.op_LD_Vx_DT),
            (0xF0FF, 0xF00A, self.op_WAITKEY),
            (0xF0FF, 0xF015, self.op_LD_DT_Vx),
            (0xF0FF, 0xF018, self.op_LD_ST_Vx),
            (0xF0FF, 0xF01E, self.op_ADD_I_Vx),
            (0xF0FF, 0xF029, self.op_FONT),
            (0xF0FF, 0xF033, self.op_BCD),
            (0xF0FF, 0xF055, self.op_STORE),
            (0xF0FF, 0xF065, self.op_LOAD),
        ]

    # ---- Cycle ----
    def step(self, m):
        self.cycles += 1

        opcode = fetch(m)
        m.pc = (m.pc + 2) & 0xFFFF
        op = decode(opcode)

        for mask, pattern, handler in self.opcodes:
            if (opcode & mask) == pattern:
                handler(m, op)
                return

        # 0nnn (SYS) lands here too; modern interpreters ignore it
        logger.warning("Unknown opcode: %04X at 0x%03X", opcode, (m.pc - 2) & 0xFFFF)

    # ---- Opcode Handlers ----

    # 00E0 - Clear the display
    def op_CLS(self, m, op):
        m.display[:] = False
        m.should_draw = True
        log("Clear the display (all pixels turned off)")

    # 00EE - Return from subroutine
    def op_RET(self, m, op):
        if m.sp == 0:
            raise StackUnderflowError(f"Stack underflow on 00EE at 0x{(m.pc - 2) & 0xFFFF:03X}")
        m.sp -= 1
        m.pc = int(m.stack[m.sp])
        log("Return to", hex(m.pc))

    # 1nnn - Jump to address NNN
    def op_JP(self, m, op):
        m.pc = op.nnn
        log("Jump to address", hex(op.nnn))

    # 2nnn - Call subroutine at NNN
    def op_CALL(self, m, op):
        if m.sp >= STACK_SIZE:
            raise StackOverflowError(f"Stack overflow on CALL 0x{op.nnn:03X} (depth {STACK_SIZE})")
        m.stack[m.sp] = m.pc
        m.sp += 1
        m.pc = op.nnn
        log("Call subroutine at", hex(op.nnn))

    # 3xkk - Skip next instruction if Vx == kk
    def op_SE_Vx_kk(self, m, op):
        if m.V[op.x] == op.nn:
            m.pc = (m.pc + 2) & 0xFFFF

    # 4xkk - Skip next instruction if Vx != kk
    def op_SNE_Vx_kk(self, m, op):
        if m.V[op.x] != op.nn:
            m.pc = (m.pc + 2) & 0xFFFF

    # 5xy0 - Skip next instruction if Vx == Vy
    def op_SE_Vx_Vy(self, m, op):
        if m.V[op.x] == m.V[op.y]:
            m.pc = (m.pc + 2) & 0xFFFF

    # 6xkk - Set Vx = kk
    def op_LD_Vx_kk(self, m, op):
        m.V[op.x] = op.nn
        log(f"Set V{op.x:X} = {op.nn}")

    # 7xkk - Add immediate, no carry flag
    def op_ADD_Vx_kk(self, m, op):
        m.V[op.x] = (m.V[op.x] + op.nn) & 0xFF

    # 8xy0..8xyE - register/register ALU
    # Flags are worked out from the operands first and VF is written last,
    # so VF ends up holding the flag even when x == F.
    def op_LD_Vx_Vy(self, m, op):
        m.V[op.x] = m.V[op.y]

    def op_OR(self, m, op):
        m.V[op.x] |= m.V[op.y]

    def op_AND(self, m, op):
        m.V[op.x] &= m.V[op.y]

    def op_XOR(self, m, op):
        m.V[op.x] ^= m.V[op.y]

    def op_ADD(self, m, op):
        total = m.V[op.x] + m.V[op.y]
        m.V[op.x] = total & 0xFF
        m.V[0xF] = 1 if total > 0xFF else 0
        log(f"Add V{op.y:X} to V{op.x:X}: result {m.V[op.x]}, carry={m.V[0xF]}")

    def op_SUB(self, m, op):
        vx, vy = m.V[op.x], m.V[op.y]
        m.V[op.x] = (vx - vy) & 0xFF
        m.V[0xF] = 1 if vx >= vy else 0
        log(f"Subtract V{op.y:X} from V{op.x:X}: result {m.V[op.x]}, NOT borrow={m.V[0xF]}")

    def op_SHR(self, m, op):
        vx = m.V[op.x]
        m.V[op.x] = vx >> 1
        m.V[0xF] = vx & 1

    def op_SUBN(self, m, op):
        vx, vy = m.V[op.x], m.V[op.y]
        m.V[op.x] = (vy - vx) & 0xFF
        m.V[0xF] = 1 if vy >= vx else 0
        log(f"Set V{op.x:X} = V{op.y:X} - V{op.x:X}: result {m.V[op.x]}, NOT borrow={m.V[0xF]}")

    def op_SHL(self, m, op):
        vx = m.V[op.x]
        m.V[op.x] = (vx << 1) & 0xFF
        m.V[0xF] = (vx >> 7) & 1

    # 9xy0 - Skip next instruction if Vx != Vy
    def op_SNE_Vx_Vy(self, m, op):
        if m.V[op.x] != m.V[op.y]:
            m.pc = (m.pc + 2) & 0xFFFF

    # Annn - Set I = NNN
    def op_LD_I(self, m, op):
        m.I = op.nnn
        log(f"Set I = {m.I:03X}")

    # Bnnn - Jump to address NNN + V0
    def op_JP_V0(self, m, op):
        m.pc = (op.nnn + m.V[0]) & 0xFFFF
        log(f"Jump to address V0 + {op.nnn:03X} = {m.pc:03X}")

    # Cxkk - Vx = random byte AND kk
    def op_RND(self, m, op):
        m.V[op.x] = m.rng.getrandbits(8) & op.nn
        log(f"Set V{op.x:X} = random_byte & {op.nn} -> {m.V[op.x]}")

    # Dxyn - Draw an 8xN sprite from memory[I] at (Vx, Vy)
    def op_DRW(self, m, op):
        # the anchor wraps, the rest of the sprite is clipped at the edges
        px = m.V[op.x] % DISPLAY_WIDTH
        py = m.V[op.y] % DISPLAY_HEIGHT
        display = m.display
        collision = 0

        for row in range(op.n):
            y = py + row
            if y >= DISPLAY_HEIGHT:
                break
            addr = m.I + row
            if addr >= MEMORY_SIZE:
                continue
            sprite = m.memory[addr]
            if sprite == 0:
                continue
            base = y * DISPLAY_WIDTH
            for bit in range(8):
                x = px + bit
                if x >= DISPLAY_WIDTH:
                    break
                if sprite & (0x80 >> bit):
                    idx = base + x
                    if display[idx]:
                        collision = 1
                    display[idx] = not display[idx]

        m.V[0xF] = collision
        m.should_draw = True
        log(f"Drew sprite at ({px}, {py}), collision={collision}")

    # Ex9E / ExA1 - Skip next instruction if key Vx is / is not pressed
    def op_SKP(self, m, op):
        if m.keypad[m.V[op.x] & 0xF]:
            m.pc = (m.pc + 2) & 0xFFFF

    def op_SKNP(self, m, op):
        if not m.keypad[m.V[op.x] & 0xF]:
            m.pc = (m.pc + 2) & 0xFFFF

    # Fx07 - Vx = delay timer
    def op_LD_Vx_DT(self, m, op):
        m.V[op.x] = m.delay_timer

    # Fx0A - Wait for a key press *and release*, then store the key in Vx.
    # Blocks by rewinding PC so this instruction runs again next step.
    def op_WAITKEY(self, m, op):
        if m.key_wait is KeyWait.AWAITING_PRESS:
            for key in range(KEY_COUNT):
                if m.keypad[key]:
                    m.wait_key = key
                    m.key_wait = KeyWait.AWAITING_RELEASE
                    log(f"Key {key:X} pressed, waiting for release")
                    break
            m.pc = (m.pc - 2) & 0xFFFF
            return

        if m.keypad[m.wait_key]:
            m.pc = (m.pc - 2) & 0xFFFF
            return

        m.V[op.x] = m.wait_key
        log(f"Key {m.wait_key:X} released, stored in V{op.x:X}")
        m.wait_key = None
        m.key_wait = KeyWait.AWAITING_PRESS

    # Fx15 - delay timer = Vx
    def op_LD_DT_Vx(self, m, op):
        m.delay_timer = m.V[op.x]

    # Fx18 - sound timer = Vx
    def op_LD_ST_Vx(self, m, op):
        m.sound_timer = m.V[op.x]

    # Fx1E - I += Vx (16-bit I, VF untouched)
    def op_ADD_I_Vx(self, m, op):
        m.I = (m.I + m.V[op.x]) & 0xFFFF

    # Fx29 - I = address of the font glyph for digit Vx
    def op_FONT(self, m, op):
        m.I = FONT_SPRITE_SIZE * m.V[op.x]

    # Fx33 - BCD of Vx at I, I+1, I+2
    def op_BCD(self, m, op):
        v = m.V[op.x]
        for offset, digit in enumerate((v // 100, (v // 10) % 10, v % 10)):
            if m.I + offset < MEMORY_SIZE:
                m.memory[m.I + offset] = digit

    # Fx55 - store V0..Vx at I
    def op_STORE(self, m, op):
        for i in range(op.x + 1):
            if m.I + i < MEMORY_SIZE:
                m.memory[m.I + i] = m.V[i]

    # Fx65 - load V0..Vx from I
    def op_LOAD(self, m, op):
        for i in range(op.x + 1):
            if m.I + i < MEMORY_SIZE:
                m.V[i] = m.memory[m.I + i]
