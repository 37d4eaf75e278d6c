import numpy as np
from scipy.special import logit, expit, ndtr, ndtri
from scipy.stats import norm


class Link(object):
    r'''
    Monotone map from a proportion in (0,1) to the real line.

    forward(w), inverse(z) and log_jacobian(w) = log |d forward / dw|.
    '''
    name = None
    code = None

    def forward(self,w):
        raise NotImplementedError

    def inverse(self,z):
        raise NotImplementedError

    def log_jacobian(self,w):
        raise NotImplementedError

    def derivative(self,w):
        return np.exp(self.log_jacobian(w))

    def __call__(self,w):
        return self.forward(w)

    def __repr__(self) -> str:
        return self.__class__.__name__ + "()"


class Logit(Link):
    name = 'logit'
    code = 1

    def forward(self,w):
        return logit(w)

    def inverse(self,z):
        return expit(z)

    def log_jacobian(self,w):
        return -np.log(w) - np.log1p(-w)


class Probit(Link):
    name = 'probit'
    code = 2

    def forward(self,w):
        return ndtri(w)

    def inverse(self,z):
        return ndtr(z)

    def log_jacobian(self,w):
        return -norm.logpdf(ndtri(w))


class CLogLog(Link):
    r'''
    z = -log(-log(w)), inverse w = exp(-exp(-z)).
    '''
    name = 'cloglog'
    code = 3

    def forward(self,w):
        return -np.log(-np.log(w))

    def inverse(self,z):
        return np.exp(-np.exp(-z))

    def log_jacobian(self,w):
        return -np.log(w) - np.log(-np.log(w))


LINKS = {link.name: link for link in (Logit, Probit, CLogLog)}
LINK_CODES = {link.code: link for link in (Logit, Probit, CLogLog)}

def get_link(link='logit') -> 'Link':
    if isinstance(link,Link):
        return link
    if isinstance(link,str) and link.lower() in LINKS:
        return LINKS[link.lower()]()
    if isinstance(link,(int,np.integer)) and int(link) in LINK_CODES:
        return LINK_CODES[int(link)]()
    raise ValueError("unknown link '{}', expected one of {}".format(link,list(LINKS.keys())))
