import unittest   # The test framework
from unittest import mock

from ecogibbs import Gibbs, EcoData, EcoDP, eco_np, ecoNP, InfeasibleStart
from ecogibbs.modules import tomography, eco
import numpy as np


def run_sampler(data,model,samples=50,burn_in=10,thin=1):
    sampler = Gibbs()
    sampler.fit(data,model,samples=samples,burn_in=burn_in,thin=thin)
    return sampler


class Test_TestBasic(unittest.TestCase):
    def test_two_units_logit(self):
        data = EcoData(X=[.3,.7],Y=[.4,.6])
        model = EcoDP(link='logit',seed=1)
        sampler = run_sampler(data,model,samples=500,burn_in=100,thin=1)
        chain = sampler.get_chain()

        self.assertEqual(len(sampler), 400)
        self.assertEqual(chain['W'].shape, (400,2,2))
        self.assertEqual(chain['mu'].shape, (400,2,2))
        self.assertEqual(chain['Sigma'].shape, (400,2,3))
        self.assertEqual(chain['alpha'].shape, (400,))
        self.assertEqual(chain['nstar'].shape, (400,))
        self.assertTrue(np.all((chain['W'] > 0) & (chain['W'] < 1)))

        W = chain['W']
        residual = data.Y - (data.X*W[...,0] + (1-data.X)*W[...,1])
        self.assertLess(np.abs(residual).max(), 1e-6)

    def test_thinning(self):
        data = EcoData(X=[.3,.7],Y=[.4,.6])
        sampler = run_sampler(data,EcoDP(seed=2),samples=30,burn_in=10,thin=3)
        self.assertEqual(len(sampler), 6)

    def test_degenerate_unit_not_sampled(self):
        data = EcoData(X=[0.,.4,.6],Y=[.3,.5,.2])
        model = EcoDP(seed=3)
        original = tomography.TomographyGrid.sample
        with mock.patch.object(tomography.TomographyGrid,'sample',autospec=True,side_effect=original) as sample:
            sampler = run_sampler(data,model,samples=20,burn_in=0)
        units = set(call.args[1] for call in sample.call_args_list)
        self.assertEqual(units, {1,2})

        W = sampler.get_chain()['W']
        np.testing.assert_allclose(W[:,0,0], 0.000001)
        np.testing.assert_allclose(W[:,0,1], .3)

    def test_homogeneous_area_conditional(self):
        data = EcoData(X=[.3,.7],Y=[.4,.6],x1_W1=[.8])
        model = EcoDP(seed=4)
        original = tomography.TomographyGrid.sample
        with mock.patch.object(tomography.TomographyGrid,'sample',autospec=True,side_effect=original) as sample, \
             mock.patch.object(eco,'sample_conditional',wraps=eco.sample_conditional) as conditional:
            run_sampler(data,model,samples=10,burn_in=0)

        self.assertEqual(conditional.call_count, 10)
        for call in conditional.call_args_list:
            self.assertEqual(call.args[1], 0)
        self.assertTrue(all(call.args[1] < data.n for call in sample.call_args_list))

        # the known coordinate never moves, the other one stays a proportion
        self.assertAlmostEqual(model.W[2,0], .8)
        self.assertTrue(0 < model.W[2,1] < 1)
        np.testing.assert_allclose(model.Wstar[2], model.link(model.W[2]))

    def test_x0_area_updates_its_own_slice(self):
        data = EcoData(X=[.3,.7],Y=[.4,.6],x1_W1=[.8],x0_W2=[.2])
        model = EcoDP(seed=5)
        run_sampler(data,model,samples=5,burn_in=0)
        self.assertAlmostEqual(model.W[2,0], .8)
        self.assertAlmostEqual(model.W[3,1], .2)
        np.testing.assert_allclose(model.Wstar[3], model.link(model.W[3]))
        np.testing.assert_allclose(model.Wstar[2], model.link(model.W[2]))

    def test_x0_area_conditions_on_W2(self):
        data = EcoData(X=[.3,.7],Y=[.4,.6],x0_W2=[.2])
        model = EcoDP(link='probit',seed=12)
        with mock.patch.object(eco,'sample_conditional',wraps=eco.sample_conditional) as conditional:
            run_sampler(data,model,samples=10,burn_in=0)

        self.assertEqual(conditional.call_count, 10)
        for call in conditional.call_args_list:
            self.assertEqual(call.args[1], 1)
            self.assertAlmostEqual(call.args[0], model.link(.2))
        self.assertAlmostEqual(model.W[2,1], .2)
        self.assertTrue(0 < model.W[2,0] < 1)
        self.assertAlmostEqual(model.Wstar[2,0], model.link(model.W[2,0]))

    def test_fixed_alpha(self):
        data = EcoData(X=[.3,.7,.5],Y=[.4,.6,.5],survey=[[.2,.7]])
        model = EcoDP(learn=False,seed=6)
        chain = run_sampler(data,model,samples=40,burn_in=0).get_chain()
        np.testing.assert_array_equal(chain['alpha'], 1.0)
        self.assertEqual(chain['nstar'].shape, (40,))
        self.assertTrue(np.all((chain['nstar'] >= 1) & (chain['nstar'] <= data.t_samp)))

    def test_predictive_and_loglik(self):
        data = EcoData(X=[.3,.7,1.],Y=[.4,.6,.5])
        model = EcoDP(link='probit',predict=True,loglik=True,seed=7)
        chain = run_sampler(data,model,samples=6,burn_in=2).get_chain()
        self.assertEqual(chain['W_pred'].shape, (4,3,2))
        self.assertEqual(chain['Y_pred'].shape, (4,3))
        W = chain['W_pred']
        np.testing.assert_allclose(chain['Y_pred'], W[...,0]*data.X + W[...,1]*(1-data.X))
        self.assertTrue(np.all(np.isfinite(chain['loglik'][:,:2])))
        self.assertTrue(np.all(np.isnan(chain['loglik'][:,2])))

    def test_same_seed_same_chain(self):
        data = EcoData(X=[.3,.7,.45],Y=[.4,.6,.5])
        chain1 = run_sampler(data,EcoDP(link='cloglog',seed=11),samples=20,burn_in=0).get_chain()
        chain2 = run_sampler(data,EcoDP(link='cloglog',seed=11),samples=20,burn_in=0).get_chain()
        for p in chain1:
            np.testing.assert_array_equal(chain1[p], chain2[p])

    def test_interrupt(self):
        data = EcoData(X=[.3,.7],Y=[.4,.6])
        calls = []
        def interrupt():
            calls.append(1)
            return len(calls) > 15
        sampler = Gibbs()
        sampler.fit(data,EcoDP(seed=8),samples=100,burn_in=5,interrupt=interrupt)
        self.assertEqual(len(sampler), 10)

    def test_infeasible_start(self):
        data = EcoData(X=[.5]*5,Y=[.0015]*5)
        model = EcoDP(seed=9,max_init_tries=1)
        with self.assertRaises(InfeasibleStart):
            model(data)

    def test_invalid_run_controls(self):
        data = EcoData(X=[.3,.7],Y=[.4,.6])
        with self.assertRaises(ValueError):
            Gibbs().fit(data,EcoDP(),samples=10,burn_in=10)
        with self.assertRaises(ValueError):
            Gibbs().fit(data,EcoDP(),samples=10,thin=0)

    def test_eco_np(self):
        chain = eco_np(X=[.3,.7],Y=[.4,.6],alpha=2.0,n_draws=30,burnin=10,seed=10)
        self.assertEqual(chain['W'].shape, (20,2,2))
        np.testing.assert_array_equal(chain['alpha'], 2.0)
        self.assertIs(ecoNP, eco_np)

    def test_sigma_upper_triangle_order(self):
        data = EcoData(X=[.3,.7],Y=[.4,.6])
        model = EcoDP(seed=13)
        chain = run_sampler(data,model,samples=3,burn_in=0).get_chain()
        Sigma = model.urn.Sigma[:data.n]
        np.testing.assert_array_equal(chain['Sigma'][-1,:,0], Sigma[:,0,0])
        np.testing.assert_array_equal(chain['Sigma'][-1,:,1], Sigma[:,0,1])
        np.testing.assert_array_equal(chain['Sigma'][-1,:,2], Sigma[:,1,1])


if __name__ == '__main__':
    unittest.main()
