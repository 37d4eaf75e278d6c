from collections import OrderedDict
from typing import Optional, Iterable, Set
import numpy as np

class Module(object):
    r'''
    Gibbs "Module" base class.

    Holds named parameters and child modules. All modules of a model draw from
    one shared numpy Generator, set with .seed().
    '''
    def __init__(self):
        self._parameters = OrderedDict()
        self._modules = OrderedDict()
        self._rng = np.random.default_rng()

    @property
    def nparams(self):
        return len(self._parameters)

    @property
    def rng(self) -> np.random.Generator:
        return self._rng

    def seed(self,seed=None) -> 'Module':
        r"""Shares one random generator with this module and all submodules.

        Args:
            seed: int, None or an existing numpy Generator.
        """
        if isinstance(seed,np.random.Generator):
            rng = seed
        else:
            rng = np.random.default_rng(seed)
        for _, module in self.named_modules():
            module._rng = rng
        return self

    # Used as a shortcut to get parameters : self._parameters['mu'] ==> self.mu
    def __getattr__(self, name: str):
        if '_parameters' in self.__dict__:
            _parameters = self.__dict__['_parameters']
            if name in _parameters:
                return _parameters[name]
        if '_modules' in self.__dict__:
            modules = self.__dict__['_modules']
            if name in modules:
                return modules[name]
        raise AttributeError("'{}' object has no attribute '{}'".format(type(self).__name__, name))

    # Used to ensure that parameters are set explicity, and not overwritten.
    def __setattr__(self, __name: str, __value) -> None:
        if '_parameters' in self.__dict__:
            if __name in self._parameters:
                raise AttributeError("Parameter '{}' must be set with '._parameters[key] = value'".format(__name))

        modules = self.__dict__.get('_modules')
        if isinstance(__value, Module):
            if modules is None:
                raise AttributeError(
                    "cannot assign module before Module.__init__() call")
            modules[__name] = __value
        elif modules is not None and __name in modules:
            if __value is not None:
                raise TypeError("cannot assign as child module (Module or None expected)")
            modules[__name] = __value
        else:
            super().__setattr__(__name,__value)

    def __dir__(self) -> Iterable[str]:
        return list(self._parameters.keys())

    def _get_name(self):
        return self.__class__.__name__

    def __repr__(self):
        child_lines = []
        for key, module in self._modules.items():
            child_lines.append('(' + key + '): ' + repr(module))

        main_str = self._get_name() + '('
        if child_lines:
            main_str += '\n  ' + '\n  '.join(child_lines) + '\n'
        main_str += ')'
        return main_str

    def __call__(self, *args, **kwds):
        return self.forward(*args, **kwds)

    def forward(self, *args, **kwds):
        raise NotImplementedError

    def named_parameters(self, prefix: str = '', recurse: bool = True):
        r"""Returns an iterator over module parameters, yielding both the
        name of the parameter as well as the parameter itself.

        Args:
            prefix (str): prefix to prepend to all parameter names.
            recurse (bool): if True, then yields parameters of this module
                and all submodules. Otherwise, yields only parameters that
                are direct members of this module.
        """
        modules = self.named_modules(prefix=prefix) if recurse else [(prefix, self)]
        for module_prefix, module in modules:
            for k, v in module._parameters.items():
                if v is None:
                    continue
                yield module_prefix + ('.' if module_prefix else '') + k, v

    def draws(self):
        r"""Values recorded by the Gibbs sampler at every kept iteration.
        Defaults to all parameters; models override it to select their output.
        """
        return self.named_parameters()

    def named_modules(self, memo: Optional[Set['Module']] = None, prefix: str = ''):
        r"""Returns an iterator over all modules in the module, yielding
        both the name of the module as well as the module itself.
        """
        if memo is None:
            memo = set()
        if self not in memo:
            memo.add(self)
            yield prefix, self
            for name, module in self._modules.items():
                if module is None:
                    continue
                submodule_prefix = prefix + ('.' if prefix else '') + name
                for m in module.named_modules(memo, submodule_prefix):
                    yield m
