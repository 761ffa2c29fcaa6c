def serialize_student(s):
    return {
        'id': s.id,
        'first_name': s.first_name,
        'last_name': s.last_name,
        'full_name': s.full_name,
        'start_date': s.start_date.strftime('%Y-%m-%d') if s.start_date else '',
        'current_belt': s.current_belt,
        'current_stripes': s.current_stripes,
        'is_active': s.is_active,
    }

def serialize_promotion(p):
    return {
        'id': p.id,
        'student_id': p.student_id,
        'from_belt': p.from_belt,
        'from_stripes': p.from_stripes,
        'to_belt': p.to_belt,
        'to_stripes': p.to_stripes,
        'promoted_at': p.promoted_at.strftime('%Y-%m-%d'),
        'notes': p.notes,
    }

def serialize_status(student, status):
    return {
        'student': serialize_student(student),
        'status': status.to_dict(),
    }
