import numpy as np
from .utils import clamp, W_EPS


def tomography_bounds(X,Y):
    r'''
    Feasible interval of (W1, W2) on the tomography line Y = X W1 + (1-X) W2.

    Returns an (n x 2 x 2) array, [[W1min, W1max], [W2min, W2max]] per unit.
    W2min is reached at W1max and W2max at W1min.
    '''
    X = np.atleast_1d(np.asarray(X,dtype=float))
    Y = np.atleast_1d(np.asarray(Y,dtype=float))
    bounds = np.zeros((X.shape[0],2,2))
    with np.errstate(divide='ignore',invalid='ignore'):
        w1_lb = np.maximum(0.0,(X+Y-1)/X)
        w1_ub = np.minimum(1.0,Y/X)
        w2_ub = (Y-X*w1_lb)/(1-X)
        w2_lb = (Y-X*w1_ub)/(1-X)
    bounds[:,0,0], bounds[:,0,1] = w1_lb, w1_ub
    bounds[:,1,0], bounds[:,1,1] = w2_lb, w2_ub

    # W1 unconstrained when X = 0, W2 unconstrained when X = 1
    x0, x1 = X == 0, X == 1
    bounds[x0,0] = [0.0,1.0]
    bounds[x0,1] = Y[x0,None]
    bounds[x1,0] = Y[x1,None]
    bounds[x1,1] = [0.0,1.0]
    return np.clip(bounds,0.0,1.0)


class EcoData(object):
    r'''
    Margins of 2x2 ecological tables, with optional individual-level data.

    X, Y: row and column margins, one entry per unit.
    survey: (S x 2) known values of (W1, W2).
    x1_W1: known W1 of homogeneous areas where X = 1 (W2 unknown).
    x0_W2: known W2 of homogeneous areas where X = 0 (W1 unknown).
    '''
    def __init__(self,X: np.ndarray,Y: np.ndarray,survey: np.ndarray=None,x1_W1: np.ndarray=None,x0_W2: np.ndarray=None) -> None:
        self.load(X=X,Y=Y,survey=survey,x1_W1=x1_W1,x0_W2=x0_W2)

    def load(self,X,Y,survey=None,x1_W1=None,x0_W2=None) -> None:
        self.X = X
        self.Y = Y
        self.survey = survey
        self.x1_W1 = x1_W1
        self.x0_W2 = x0_W2

    @staticmethod
    def _proportions(val,name,ndim=1):
        val = np.asarray(val,dtype=float)
        if ndim == 1:
            val = np.atleast_1d(val)
        if val.ndim != ndim:
            raise ValueError("{} must be {}d".format(name,ndim))
        if not np.all(np.isfinite(val)):
            raise ValueError("{} must be finite".format(name))
        if np.any((val < 0) | (val > 1)):
            raise ValueError("{} must lie in [0,1]".format(name))
        return val

    @property
    def X(self) -> np.ndarray:
        return self._X
    @X.setter
    def X(self,val) -> None:
        self._X = self._proportions(val,"X")

    @property
    def Y(self) -> np.ndarray:
        return self._Y
    @Y.setter
    def Y(self,val) -> None:
        val = self._proportions(val,"Y")
        if val.shape[0] != self.X.shape[0]:
            raise ValueError("X and Y must have the same length")
        self._Y = val

    @property
    def survey(self) -> np.ndarray:
        return self._survey
    @survey.setter
    def survey(self,val) -> None:
        if val is None:
            val = np.zeros((0,2))
        val = self._proportions(val,"survey",ndim=2)
        if val.shape[-1] != 2:
            raise ValueError("survey must be (obs x 2): known W1, W2")
        self._survey = clamp(val)

    @property
    def x1_W1(self) -> np.ndarray:
        return self._x1_W1
    @x1_W1.setter
    def x1_W1(self,val) -> None:
        if val is None:
            val = np.zeros(0)
        self._x1_W1 = clamp(self._proportions(val,"x1_W1"))

    @property
    def x0_W2(self) -> np.ndarray:
        return self._x0_W2
    @x0_W2.setter
    def x0_W2(self,val) -> None:
        if val is None:
            val = np.zeros(0)
        self._x0_W2 = clamp(self._proportions(val,"x0_W2"))

    @property
    def n(self) -> int:
        return self.X.shape[0]
    @property
    def x1_samp(self) -> int:
        return self.x1_W1.shape[0]
    @property
    def x0_samp(self) -> int:
        return self.x0_W2.shape[0]
    @property
    def s_samp(self) -> int:
        return self.survey.shape[0]
    @property
    def t_samp(self) -> int:
        return self.n + self.x1_samp + self.x0_samp + self.s_samp

    # Index ranges of each block in the stacked (t_samp x 2) arrays
    @property
    def x1_index(self) -> np.ndarray:
        return self.n + np.arange(self.x1_samp)
    @property
    def x0_index(self) -> np.ndarray:
        return self.n + self.x1_samp + np.arange(self.x0_samp)
    @property
    def survey_index(self) -> np.ndarray:
        return self.n + self.x1_samp + self.x0_samp + np.arange(self.s_samp)

    @property
    def bounds(self) -> np.ndarray:
        return tomography_bounds(self.X,self.Y)

    @property
    def degenerate(self) -> np.ndarray:
        r'''
        Units whose W is fixed by the margins and never sampled.
        '''
        return (self.X == 0) | (self.X == 1) | (self.Y == 0) | (self.Y == 1)

    def fixed_W(self) -> np.ndarray:
        r'''
        W of the degenerate units; rows of other units are nan.
        '''
        W = np.full((self.n,2),np.nan)
        deg = self.degenerate
        W[deg] = clamp(self.Y[deg])[:,None]
        W[self.X == 0,0] = W_EPS
        W[self.X == 1,1] = W_EPS
        return W

    def __len__(self) -> int:
        return self.n

    def __repr__(self) -> str:
        output = self.__class__.__name__  + " \n"
        output += "X =  " + str(self.X) + " \n"
        output += "Y =  " + str(self.Y) + " \n"
        output += "survey = {}, x1 = {}, x0 = {} \n".format(self.s_samp,self.x1_samp,self.x0_samp)
        return output
