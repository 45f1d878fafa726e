"""
End-to-end tests: mangled symbol in, signature out.
"""

from dataclasses import dataclass

from lib_cw_demangler import DemangleResult, decode_and_render, demangle, demangle_all


@dataclass
class CaseData:
    input: str
    expected: str

    def test(self, pretty: bool = False):
        """
        Run the demangler on the input and verify output matches.
        """
        actual = demangle(self.input, pretty=pretty)

        assert self.expected == actual, (
            "\n" f"Input:    {self.input}\n" f"Expected: {self.expected}\n" f"Actual:   {actual}\n"
        )


def run(test_data):
    for test in test_data:
        test.test()


def test_basic():
    """
    Plain functions and methods.
    """
    run([
        CaseData('saveOnQuitOverlay__Fv', 'saveOnQuitOverlay(void)'),
        CaseData('check__3FooCFUlR3Bar', 'Foo::check(unsigned long,Bar &) const'),
        CaseData('create__7FactorySFi', 'static Factory::create(int)'),
        CaseData('f__Fxrw', 'f(long long,long double,wchar_t)'),
        CaseData('put__FScUc', 'put(signed char,unsigned char)'),
        CaseData('printf__FPCce', 'printf(char const *,...)'),
        CaseData('Test__Q34nw4r3snd6detailFPVUi', 'nw4r::snd::detail::Test(unsigned int volatile *)'),
    ])


def test_special_names():
    """
    Constructors, destructors and operators.
    """
    run([
        CaseData('__ct__3FooFv', 'Foo::Foo(void)'),
        CaseData('__dt__Q23foo3BarFv', 'foo::Bar::~Bar(void)'),
        CaseData('__pl__3VecCFRC3Vec', 'Vec::operator+(Vec const &) const'),
        CaseData('__nw__FUl', 'operator new(unsigned long)'),
        CaseData('__opb__3FooCFv', 'Foo::operator bool (void) const'),
        CaseData('__ct__Q214NMSndObject<4>14SoundHandlePrmFv',
                 'NMSndObject<4>::SoundHandlePrm::SoundHandlePrm(void)'),
    ])


def test_data_symbols():
    """
    Symbols without a function type.
    """
    run([
        CaseData('sInstance__7Manager', 'Manager::sInstance'),
        CaseData('__vt__7Manager', 'Manager virtual table'),
        CaseData('__vt__Q23foo3Bar', 'foo::Bar virtual table'),
        CaseData('@LOCAL@update__5SceneFv@sFrame', 'Scene::update(void)::sFrame'),
        CaseData('@GUARD@update__5SceneFv@sFrame@1', 'Scene::update(void)::sFrame guard variable'),
    ])


def test_templates():
    run([
        CaseData('get__8Vec<f,3>CFi', 'Vec<float,3>::get(int) const'),
        CaseData('reset__13Handle<&gFoo>Fv', 'Handle<&gFoo>::reset(void)'),
        CaseData('make<i>__FRCi_Pi', 'int * make<int>(int const &)'),
        CaseData(
            '__sort132<RPFRCQ54nw4r3g3d6detail7workmem4MdlZRCQ54nw4r3g3d6detail7workmem4MdlZ_b,PQ54nw4r3g3d6detail7workmem4MdlZ>__3stdFPQ54nw4r3g3d6detail7workmem4MdlZPQ54nw4r3g3d6detail7workmem4MdlZPQ54nw4r3g3d6detail7workmem4MdlZRPFRCQ54nw4r3g3d6detail7workmem4MdlZRCQ54nw4r3g3d6detail7workmem4MdlZ_b_v',
            'void std::__sort132<bool (*&)(nw4r::g3d::detail::workmem::MdlZ const &,nw4r::g3d::detail::workmem::MdlZ const &),nw4r::g3d::detail::workmem::MdlZ *>'
            '(nw4r::g3d::detail::workmem::MdlZ *,nw4r::g3d::detail::workmem::MdlZ *,nw4r::g3d::detail::workmem::MdlZ *,'
            'bool (*&)(nw4r::g3d::detail::workmem::MdlZ const &,nw4r::g3d::detail::workmem::MdlZ const &))'),
    ])


def test_function_types():
    """
    Pointers and references to functions and members.
    """
    run([
        CaseData('HookAlloc__Q44nw4r3snd6detail8AxfxImplFPPFUl_PvPPFPv_v',
                 'nw4r::snd::detail::AxfxImpl::HookAlloc(void * (**)(unsigned long),void (**)(void *))'),
        CaseData('ForEach__Q34nw4r3g3d7ScnLeafFPFPQ34nw4r3g3d6ScnObjPv_Q44nw4r3g3d6ScnObj13ForEachResultPvb',
                 'nw4r::g3d::ScnLeaf::ForEach(nw4r::g3d::ScnObj::ForEachResult (*)(nw4r::g3d::ScnObj *,void *),void *,bool)'),
        CaseData('foo__FPFi_PFv_v', 'foo(void (*(*)(int))(void))'),
        CaseData('call__FRFv_v', 'call(void (&)(void))'),
        CaseData('call__FCPFv_v', 'call(void (*const)(void))'),
        CaseData('set__FM3Fooi', 'set(int Foo:: *)'),
        CaseData(
            'getVideo__Q33EGG126TSystem<Q23EGG5Video,Q23EGG12AsyncDisplay,Q23EGG10XfbManager,Q23EGG14SimpleAudioMgr,Q23EGG12SceneManager,Q23EGG12ProcessMeter>13ConfigurationCFRP10sStateIf_cM7fBase_cFPCvPv_iM7fBase_cFPCvPv_iM7fBase_cFPCvPvQ27fBase_c10MAIN_STATE_v',
            'EGG::TSystem<EGG::Video,EGG::AsyncDisplay,EGG::XfbManager,EGG::SimpleAudioMgr,EGG::SceneManager,EGG::ProcessMeter>::Configuration::getVideo'
            '(sStateIf_c * &,int (fBase_c::*)(void const *,void *),int (fBase_c::*)(void const *,void *),'
            'void (fBase_c::*)(void const *,void *,fBase_c::MAIN_STATE)) const'),
    ])


def test_arrays():
    run([
        CaseData('fill__FA4_A3_f', 'fill(float[4][3])'),
        CaseData('f__FA4_Pi', 'f(int *[4])'),
        CaseData('f__FPA4_i', 'f(int (*)[4])'),
        CaseData('f__FRA4_i', 'f(int (&)[4])'),
        CaseData('f__FCPA4_i', 'f(int (*const)[4])'),
        CaseData('f__FPA4_Pi', 'f(int *(*)[4])'),
        CaseData('f__FM3FooA4_i', 'f(int (Foo::*)[4])'),
        CaseData('f__FA2_8Vec<f,3>', 'f(Vec<float,3>[2])'),
    ])


def test_const_pointers():
    """
    A qualifier in front of "P" applies to the pointer, not the pointee.
    """
    run([
        CaseData('f__FPCc', 'f(char const *)'),
        CaseData('f__FCPc', 'f(char *const)'),
        CaseData('f__FCPCc', 'f(char const *const)'),
        CaseData('f__FPCPc', 'f(char *const *)'),
    ])


def test_thunks():
    run([
        CaseData('@24@SetBinaryInner__Q23EGG11DrawPathDOFFRCQ33EGG28IBinary<Q23EGG11DrawPathDOF>3Bin',
                 '[thunk]:EGG::DrawPathDOF::SetBinaryInner(EGG::IBinary<EGG::DrawPathDOF>::Bin const &)'),
        CaseData('@24@4@foo__3BarFv', '[thunk]:Bar::foo(void)'),
    ])


def test_pretty():
    CaseData('check__3FooCFUlR3Bar', 'Foo::check(unsigned long,\n           Bar &) const').test(pretty=True)


def test_unmangled_symbols_pass_through():
    """
    Anything that isn't a valid mangled name comes back unchanged.
    """
    for sym in ['main', '__sinit_foo_cpp', 'foo__3BarFz', 'foo__3BarX', 'foo__100Bar', 'a b__Fv', '', '____']:
        assert decode_and_render(sym) == DemangleResult(sym, False)


def test_succeeded_flag():
    assert decode_and_render('foo__3BarFi') == DemangleResult('Bar::foo(int)', True)


def test_demangle_all_keeps_order():
    symbols = ['foo__3BarFi', 'main', '__ct__3FooFv']
    assert [r.signature for r in demangle_all(symbols)] == ['Bar::foo(int)', 'main', 'Foo::Foo(void)']
    assert [r.succeeded for r in demangle_all(symbols)] == [True, False, True]


def test_deeply_nested_symbol_does_not_stop_the_batch():
    deep = 'f__F' + 'P' * 5000 + 'c'
    results = demangle_all([deep, 'foo__3BarFi'])
    assert results == [DemangleResult(deep, False), DemangleResult('Bar::foo(int)', True)]
