from .module import Module
from .parameters import NormalWishart
from .mixture import InfiniteMixture, PolyaUrn
from .tomography import TomographyGrid, grid_points, sample_conditional
from .eco import EcoDP
