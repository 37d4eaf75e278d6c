import logging
from collections import OrderedDict
from typing import Callable, Iterable, Optional
import numpy as np
from tqdm import tqdm

from .utils import get_mean, get_median
from .dataclass import EcoData
from .modules.module import Module

logger = logging.getLogger(__name__)


class Gibbs(object):
    r'''
    Gibbs sampler: runs a model one iteration at a time and keeps its draws.

    Draws are kept after burn_in, every thin-th iteration (thin=1 keeps all).
    '''
    def __init__(self):
        self._samples = OrderedDict()
        self._estimates = OrderedDict()
        self.step_count = 0

    @property
    def nparams(self):
        return len(self._estimates)

    def __dir__(self) -> Iterable[str]:
        return list(self._estimates.keys())

    def __repr__(self) -> str:
        output = self.__class__.__name__  + " \n"
        for i in self._estimates.keys():
            output += " " + i +  " =  " + str(self._estimates[i]) + " \n"
        return output

    def __len__(self) -> int:
        return self.step_count

    def __call__(self, params):
        return self.step(params)

    def get_estimates(self,reduction='median',burn_rate=0,skip_rate=1):
        if reduction == 'median':
            estim_fun = get_median
        else:
            estim_fun = get_mean

        chain = self.get_chain(burn_rate=burn_rate,skip_rate=skip_rate)
        for p in chain:
            self._estimates[p] = estim_fun(chain[p])
        return self._estimates

    def get_chain(self,burn_rate:float=0,skip_rate=1,flatten=False):
        chain = {}
        skip_rate = int(max(skip_rate,1))
        for p in self._samples:
            num_samples = len(self._samples[p])
            burn_in = int(num_samples * burn_rate)
            stacked = np.stack(self._samples[p][burn_in::skip_rate],0)
            if flatten is True:
                stacked = stacked.reshape(stacked.shape[0],-1)
            chain[p] = stacked.copy()
        return chain

    def step(self,params):
        for name,value in params:
            if name not in self._samples.keys():
                self._samples[name] = []
            self._samples[name].append(np.array(value,copy=True))
        self.step_count += 1

    def fit(self,data: 'EcoData',model: 'Module',samples=10,burn_in=0,thin=1,verbose=False,interrupt: Optional[Callable[[],bool]]=None):
        r'''
        Runs samples iterations of model on data.

        interrupt: optional callable polled before every iteration; when it
        returns True the run stops and the draws kept so far remain available.
        '''
        if burn_in < 0 or burn_in >= samples:
            raise ValueError("samples should be larger than burn_in")
        if thin < 1:
            raise ValueError("thin must be at least 1")

        count = 0
        progress = 0
        for iter in tqdm(range(samples),disable=not verbose):
            if interrupt is not None and interrupt():
                logger.warning("Interrupted at iteration %d, %d draws kept.", iter, self.step_count)
                break
            model(data)
            if iter >= burn_in:
                count += 1
                if count == thin:
                    self.step(model.draws())
                    count = 0
            if verbose and (10*(iter+1)) // samples > progress:
                progress = (10*(iter+1)) // samples
                logger.info("%3d percent done.", progress*10)

        if self.step_count > 0:
            self.get_estimates()
        return self
