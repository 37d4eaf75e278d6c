from .core import Gibbs
from .dataclass import EcoData, tomography_bounds
from .exceptions import InfeasibleStart, IntegrationNonconvergence, InvalidSufficientStatisticKind
from .integrate import TruncatedBVN
from .links import Link, Logit, Probit, CLogLog, get_link
from .models import eco_np, ecoNP
from .modules import Module, NormalWishart, InfiniteMixture, PolyaUrn, TomographyGrid, EcoDP
from .utils import W_EPS
