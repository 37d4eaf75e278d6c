import unittest

from ecogibbs import InfiniteMixture, PolyaUrn
import numpy as np


class Test_InfiniteMixture(unittest.TestCase):
    def test_alpha_positive(self):
        mix = InfiniteMixture(alpha=1,a0=1,b0=.1).seed(0)
        for N in [1,2,10,200]:
            for K in set([1,N//2+1,N]):
                z = np.arange(N) % K
                for _ in range(25):
                    mix(z)
                    self.assertGreater(mix.alpha, 0)
                    self.assertTrue(0 <= mix.eta <= 1)

    def test_small_shape(self):
        mix = InfiniteMixture(alpha=1,a0=1e-3,b0=1e3).seed(1)
        for _ in range(100):
            mix(np.zeros(5,dtype=int))
            self.assertGreater(mix.alpha, 0)

    def test_fixed(self):
        mix = InfiniteMixture(alpha=1.5,learn=False)
        mix(np.arange(10))
        self.assertEqual(mix.alpha, 1.5)

    def test_invalid(self):
        with self.assertRaises(ValueError):
            InfiniteMixture(alpha=0)
        with self.assertRaises(ValueError):
            InfiniteMixture(a0=-1)


class Test_PolyaUrn(unittest.TestCase):
    def setUp(self):
        rng = np.random.default_rng(3)
        self.y = np.concatenate([rng.normal(-3,.3,(15,2)),rng.normal(3,.3,(15,2))],0)

    def check_remixed(self,urn):
        labels = np.unique(urn.z)
        np.testing.assert_array_equal(labels, np.arange(urn.nstar))
        for k in labels:
            idx = urn.z == k
            self.assertTrue(np.all(urn.mu[idx] == urn.mu[idx][0]))
            self.assertTrue(np.all(urn.Sigma[idx] == urn.Sigma[idx][0]))
            self.assertTrue(np.all(urn.InvSigma[idx] == urn.InvSigma[idx][0]))
        # different tables, different parameters
        self.assertEqual(len(np.unique(urn.mu[:,0])), urn.nstar)

    def test_initialize(self):
        urn = PolyaUrn().seed(4)
        urn.initialize(self.y.shape[0])
        self.assertEqual(urn.nstar, 30)
        np.testing.assert_array_equal(urn.z, np.arange(30))

    def test_labels_contiguous_after_remix(self):
        urn = PolyaUrn().seed(5)
        for _ in range(10):
            urn(self.y,1.0)
            self.check_remixed(urn)
            self.assertTrue(1 <= urn.nstar <= self.y.shape[0])

    def test_separates_clusters(self):
        urn = PolyaUrn(S0=1).seed(6)
        for _ in range(30):
            urn(self.y,1.0)
        self.assertEqual(len(np.intersect1d(urn.z[:15],urn.z[15:])), 0)

    def test_cumulative_new_table_last(self):
        urn = PolyaUrn().seed(7)
        urn.initialize(self.y.shape[0])
        cum, others = urn.cumulative(3,self.y,1.0)
        self.assertEqual(cum.shape[0], self.y.shape[0])
        self.assertNotIn(3, others)
        self.assertTrue(np.all(np.diff(cum) >= 0))
        self.assertAlmostEqual(cum[-1], 1.0)

    def test_single_observation_opens_table(self):
        urn = PolyaUrn().seed(8)
        urn(self.y[:1],1.0)
        self.assertEqual(urn.nstar, 1)
        np.testing.assert_array_equal(urn.z, [0])


if __name__ == '__main__':
    unittest.main()
