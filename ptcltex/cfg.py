from typing import NamedTuple

################################################################################
# ╭────────────────────────────  CONFIG  ────────────────────────────╮
################################################################################

class Cfg:
    MAX_PARTICLES    = 50_000        # working-set cap after subsampling
    AUTO_OPTIMIZE_AT = 100_000       # subsample automatically above this
    FALLBACK_BOUNDS  = ((-20.0, -20.0, -20.0),
                        ( 20.0,  20.0,  20.0))   # used when metadata is missing
    SHUFFLE_MUL  = 1337              # seed = W*H*1337
    SHUFFLE_STEP = 17                # per-step perturbation
    SHUFFLE_MOD  = 10000
    VERTICAL_AXIS = 1                # y
    FLIP_VERTICAL = True             # display convention of the web viewer
    IMAGE_FORMAT  = "png"
    MAX_PIXELS    = 2**31 - 1        # size*size must stay 32-bit safe

################################################################################
# ╭──────────────────────  DATA STRUCTURES  ───────────────────────╮
################################################################################

_PRECISION = {"png": "8-bit RGBA",
              "jpg": "8-bit RGB"}

_EXTENSION = {"png": "png",
              "jpg": "jpg"}


class CodecOptions(NamedTuple):
    flip_vertical_axis: bool = Cfg.FLIP_VERTICAL
    image_format: str = Cfg.IMAGE_FORMAT

    def precision(self) -> str:
        try:
            return _PRECISION[self.image_format]
        except KeyError:
            raise ValueError(f"Unsupported image format {self.image_format!r}; "
                             f"expected one of {sorted(_PRECISION)}") from None

    def extension(self) -> str:
        self.precision()
        return _EXTENSION[self.image_format]

