from clinic.services.cpf import MSG_INVALID, MSG_LENGTH, MSG_VALID, clean_cpf, format_cpf, lookup_cpf, validate_cpf


def test_valid_cpf_with_and_without_mask():
    assert validate_cpf('52998224725')
    assert validate_cpf('529.982.247-25')
    assert lookup_cpf('529.982.247-25') == {'valid': True, 'message': MSG_VALID}


def test_wrong_check_digit_is_invalid():
    assert lookup_cpf('52998224724') == {'valid': False, 'message': MSG_INVALID}
    assert lookup_cpf('52998224735') == {'valid': False, 'message': MSG_INVALID}


def test_repeated_digits_are_invalid():
    for digit in '0123456789':
        assert not validate_cpf(digit * 11)


def test_length_is_checked_first():
    assert lookup_cpf('123') == {'valid': False, 'message': MSG_LENGTH}
    assert lookup_cpf('') == {'valid': False, 'message': MSG_LENGTH}
    assert lookup_cpf(None) == {'valid': False, 'message': MSG_LENGTH}
    assert lookup_cpf('529982247250')['message'] == MSG_LENGTH


def test_clean_and_format():
    assert clean_cpf(' 529.982.247-25 ') == '52998224725'
    assert format_cpf('52998224725') == '529.982.247-25'
    assert format_cpf('529') == '529'
    assert format_cpf('5299') == '529.9'
    assert format_cpf('5299822') == '529.982.2'
    assert format_cpf('5299822472') == '529.982.247-2'
    assert format_cpf(None) == ''
